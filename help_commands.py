import discord
from discord.ext import commands
from discord import app_commands

from api.utils.embeds import create_notice_embed
from common import bot_version
from i18n import get_text


class HelpCommands(commands.Cog):
    def __init__(self, bot):
        self.bot = bot

    def build_help_embed(self, lang):
        context = self.bot.context
        embed = create_notice_embed(
            lang,
            get_text(lang, 'help'),
            level='info',
            bot_name=self.bot.user.name if self.bot.user else "DBE",
            args={'valid': context.emoji_valid, 'delete': context.emoji_delete},
        )
        embed.add_field(name="Version", value=bot_version, inline=False)
        return embed

    @app_commands.command(name="help", description="Shows the event commands")
    async def helpme(self, interaction: discord.Interaction):
        lang = self.bot.context.lang_for_server(interaction.guild.id if interaction.guild else None)
        await interaction.response.send_message(embed=self.build_help_embed(lang), ephemeral=True)


async def setup(bot):
    await bot.add_cog(HelpCommands(bot))
