# embeds.py - Discord embed creation functions

import discord
from typing import Iterable, Optional

from i18n import get_lang, parse_lang_message
from utils import format_event_day, format_event_time

# Colors by notice level
LEVEL_COLORS = {
    'error': 0xFF0000,
    'info': 0x008DC7,
    'success': 0x1A9E00,
    'warn': 0xC08D00,
}

LEVEL_EMOJIS = {
    'error': "⛔",
    'info': "ℹ️",
    'success': "✅",
    'warn': "⚠️",
}


def get_color_for_level(level):
    return LEVEL_COLORS.get(level, LEVEL_COLORS['warn'])


def create_notice_embed(lang, content, level='info', bot_name="DBE", args=None, prefix=True):
    """
    Build a notice embed from a language entry (``{"title", "description"}``).

    ``args`` fills the ``$$key$$`` placeholders of the description.
    """
    i18n = get_lang(lang)
    description = content['description']
    if args:
        description = parse_lang_message(description, args)

    title = content['title']
    if prefix:
        title = f"{LEVEL_EMOJIS.get(level, LEVEL_EMOJIS['warn'])} {title}"

    embed = discord.Embed(title=title, description=description, color=get_color_for_level(level))
    embed.set_footer(text=f"{bot_name}{i18n['embed']['credits']}")
    return embed


def format_participants(lang, participants: Iterable[str]):
    participants = sorted(participants)
    if not participants:
        return get_lang(lang)['embed']['event']['noPeople']
    return "".join(f"\n - <@!{user_id}>" for user_id in participants)


def create_event_embed(lang, title, description, date, participants: Iterable[str],
                       image: Optional[str] = None, timezone="UTC", bot_name="DBE"):
    """Render an event card from its current state."""
    i18n = get_lang(lang)
    args = {
        'description': description,
        'day': format_event_day(date, timezone),
        'time': format_event_time(date, timezone),
        'participants': format_participants(lang, participants),
    }
    embed = create_notice_embed(
        lang,
        {'title': title, 'description': i18n['embed']['event']['description']},
        level='info',
        bot_name=bot_name,
        args=args,
        prefix=False,
    )
    if image:
        embed.set_image(url=image)
    return embed
