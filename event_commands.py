# event_commands.py

import logging

import discord
from discord import app_commands
from discord.ext import commands

from api.models.schemas import EventCreateRequest
from api.utils.embeds import create_notice_embed
from common import is_admin_or_owner, is_privileged
from errors import DBEError, NotFoundError, PermissionDeniedError, ValidationError
from i18n import LANGS, get_text, is_supported_lang
from utils import parse_event_date

logger = logging.getLogger(__name__)


class EventCommands(commands.Cog):
    def __init__(self, bot):
        self.bot = bot

    @property
    def context(self):
        return self.bot.context

    def _bot_name(self):
        return self.bot.user.name if self.bot.user else "DBE"

    def notice(self, lang, path, level='error', args=None):
        return create_notice_embed(lang, get_text(lang, path), level=level, bot_name=self._bot_name(), args=args)

    def check_event_channel(self, interaction: discord.Interaction):
        """
        Return ``(lang, error_embed)`` for an event command.

        Event commands only work once the server is initialized, and only in
        the channel it was initialized in.
        """
        if interaction.guild is None:
            return self.context.default_lang, self.notice(self.context.default_lang, 'system.notInitialized')

        config = self.context.get_server_config(interaction.guild.id)
        if config is None:
            return self.context.default_lang, self.notice(self.context.default_lang, 'system.notInitialized')
        if str(interaction.channel.id) != config.channel_id:
            return config.lang, self.notice(config.lang, 'system.wrongChannel', args={'channel': config.channel_id})
        return config.lang, None

    @app_commands.command(name="newevent", description="Create an event members can join with a reaction")
    @app_commands.describe(
        date="Day of the event (dd/mm/yyyy)",
        time="Time of the event (HH:MM)",
        title="Title of the event",
        description="Description of the event",
        image="Optional image URL",
    )
    async def new_event(self, interaction: discord.Interaction, date: str, time: str, title: str,
                        description: str, image: str = None):
        lang, error = self.check_event_channel(interaction)
        if error:
            await interaction.response.send_message(embed=error, ephemeral=True)
            return

        try:
            event_date = parse_event_date(date, time, self.context.timezone)
        except ValueError:
            logger.warning(f"Command newevent by {interaction.user.id} has a malformed date: {date} {time}")
            await interaction.response.send_message(embed=self.notice(lang, 'new.errors.badFormat'), ephemeral=True)
            return

        request = EventCreateRequest(
            author_id=interaction.user.id,
            title=title,
            description=description,
            date=event_date,
            image=image,
            server_id=interaction.guild.id,
            channel_id=interaction.channel.id,
        )

        await interaction.response.defer(ephemeral=True)
        try:
            await self.bot.event_manager.create_event(request)
        except ValidationError:
            await interaction.followup.send(embed=self.notice(lang, 'new.errors.past'), ephemeral=True)
            return
        except DBEError as e:
            logger.error(f"Event creation failed for {interaction.user.id}: {e}")
            await interaction.followup.send(embed=self.notice(lang, 'system.unknownError'), ephemeral=True)
            return

        await interaction.followup.send(
            embed=self.notice(lang, 'new.success', level='success', args={'title': title}), ephemeral=True
        )

    @app_commands.command(name="deleteevent", description="Delete an event you created")
    @app_commands.describe(message_id="ID of the event message")
    async def delete_event(self, interaction: discord.Interaction, message_id: str):
        lang = self.context.lang_for_server(interaction.guild.id if interaction.guild else None)

        await interaction.response.defer(ephemeral=True)
        try:
            await self.bot.event_manager.delete_event(
                message_id.strip(), interaction.user.id, is_privileged(interaction.user)
            )
        except NotFoundError:
            await interaction.followup.send(embed=self.notice(lang, 'system.notFound'), ephemeral=True)
            return
        except PermissionDeniedError:
            await interaction.followup.send(embed=self.notice(lang, 'system.permissionDenied'), ephemeral=True)
            return
        except DBEError as e:
            logger.error(f"Deleting event on message {message_id} failed: {e}")
            await interaction.followup.send(embed=self.notice(lang, 'system.unknownError'), ephemeral=True)
            return

        await interaction.followup.send(embed=self.notice(lang, 'delete.success', level='success'), ephemeral=True)

    @app_commands.command(name="dbeinit", description="Use this channel for events")
    @app_commands.describe(lang="Language of the bot messages (enEN, frFR)")
    async def init_server(self, interaction: discord.Interaction, lang: str):
        if not await is_admin_or_owner(interaction):
            await interaction.response.send_message("You do not have the necessary permissions.", ephemeral=True)
            return

        default_lang = self.context.default_lang
        if not is_supported_lang(lang):
            embed = self.notice(default_lang, 'init.errors.badLang',
                                args={'langs': "\n".join(f"- {name}" for name in LANGS)})
            await interaction.response.send_message(embed=embed, ephemeral=True)
            return

        server_id = str(interaction.guild.id)
        channel_id = str(interaction.channel.id)
        existing = self.context.get_server_config(server_id)

        await interaction.response.defer(ephemeral=True)
        try:
            if existing:
                await self.context.server_config_store.update_config(existing.id, channel_id, lang)
                logger.info(f"Server config updated for server {server_id} on channel {channel_id} with lang {lang}")
                embed = self.notice(lang, 'init.update', level='success')
            else:
                await self.context.server_config_store.create_config(server_id, channel_id, lang)
                logger.info(f"Server config created for server {server_id} on channel {channel_id} with lang {lang}")
                embed = self.notice(lang, 'init.create', level='success')
            await self.context.load_server_configs()
        except DBEError as e:
            logger.error(f"Could not save the server config of {server_id}: {e}")
            embed = self.notice(default_lang, 'system.unknownError')

        await interaction.followup.send(embed=embed, ephemeral=True)


async def setup(bot):
    await bot.add_cog(EventCommands(bot))
