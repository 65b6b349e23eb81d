# common.py

import discord
from config import BOT_CONFIG

bot_token = BOT_CONFIG['bot_token']
server_id = BOT_CONFIG['server_id']
store_url = BOT_CONFIG['store_url']
store_token = BOT_CONFIG['store_token']
reaction_emoji_valid = BOT_CONFIG['reaction_emoji_valid']
reaction_emoji_invalid = BOT_CONFIG['reaction_emoji_invalid']
reaction_emoji_delete = BOT_CONFIG['reaction_emoji_delete']
default_lang = BOT_CONFIG['default_lang']
event_timezone = BOT_CONFIG['timezone']
call_timeout = BOT_CONFIG['call_timeout']
bot_version = BOT_CONFIG['bot_version']


def is_privileged(member):
    """Administrators may delete any event."""
    permissions = getattr(member, "guild_permissions", None)
    return bool(permissions and permissions.administrator)


async def is_admin_or_owner(interaction: discord.Interaction):
    return interaction.guild is not None and (
        interaction.user.id == interaction.guild.owner_id or is_privileged(interaction.user)
    )
