# config.py

import os
from dotenv import load_dotenv

load_dotenv()

def get_env_variable(var_name, default=None):
    return os.getenv(var_name, default)

BOT_CONFIG = {
    'bot_token': get_env_variable('BOT_TOKEN'),
    'store_url': get_env_variable('STORE_URL', 'http://localhost:1337'),
    'store_token': get_env_variable('STORE_TOKEN'),
    'server_id': get_env_variable('SERVER_ID'),
    'reaction_emoji_valid': get_env_variable('REACTION_EMOJI_VALID', '✅'),
    'reaction_emoji_invalid': get_env_variable('REACTION_EMOJI_INVALID', '❌'),
    'reaction_emoji_delete': get_env_variable('REACTION_EMOJI_DELETE', '🗑️'),
    'default_lang': get_env_variable('DEFAULT_LANG', 'enEN'),
    'timezone': get_env_variable('TIMEZONE', 'UTC'),
    'call_timeout': float(get_env_variable('CALL_TIMEOUT', '10')),
    'api_host': get_env_variable('API_HOST', '0.0.0.0'),
    'api_port': int(get_env_variable('API_PORT', '5001')),
    'log_level': get_env_variable('LOG_LEVEL', 'INFO'),
    'log_file': get_env_variable('LOG_FILE'),
    'bot_version': "2.0.0"
}
