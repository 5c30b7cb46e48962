"""Discord chat adapter.

Implements the core ChatPort on top of a discord.py client. discord.py
exceptions are translated into the core PlatformError family so the handlers
never import discord.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, TypeVar

import discord
from discord.utils import escape_markdown

from core.errors import ForbiddenError, NotFoundError, PlatformError
from core.models import CommandContext, RoleMembers, SentMessage

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def _snowflake(value: str) -> int:
    # A non-numeric id can never match a Discord object.
    if not value or not value.isdigit():
        raise NotFoundError(f"Invalid Discord id: {value!r}")
    return int(value)


async def _call(awaitable: Awaitable[T]) -> T:
    try:
        return await awaitable
    except discord.NotFound as exc:
        raise NotFoundError(str(exc)) from exc
    except discord.Forbidden as exc:
        raise ForbiddenError(str(exc)) from exc
    except discord.HTTPException as exc:
        raise PlatformError(str(exc)) from exc


class DiscordChat:
    """ChatPort adapter backed by a discord.Client."""

    def __init__(self, client: discord.Client) -> None:
        self._client = client

    async def fetch_guild(self, guild_id: str) -> discord.Guild:
        snowflake = _snowflake(guild_id)
        # Cached guilds carry their member list, fetched ones do not.
        guild = self._client.get_guild(snowflake)
        if guild is not None:
            return guild
        return await _call(self._client.fetch_guild(snowflake))

    async def fetch_channel(self, channel_id: str) -> Any:
        return await _call(self._client.fetch_channel(_snowflake(channel_id)))

    async def fetch_message(self, channel: Any, message_id: str) -> discord.Message:
        if not hasattr(channel, "fetch_message"):
            raise NotFoundError(f"Channel {getattr(channel, 'id', '?')} has no messages")
        return await _call(channel.fetch_message(_snowflake(message_id)))

    async def add_reaction(self, message: discord.Message, emoji: str) -> None:
        await _call(message.add_reaction(emoji))

    async def create_role(self, guild: discord.Guild, name: str, reason: str) -> str:
        role = await _call(guild.create_role(name=name, reason=reason))
        LOGGER.info("Created role %s (%s) in guild %s", role.name, role.id, guild.id)
        return str(role.id)

    async def _fetch_role(self, guild: discord.Guild, role_id: str) -> discord.Role:
        snowflake = _snowflake(role_id)
        role = guild.get_role(snowflake)
        if role is None:
            roles = await _call(guild.fetch_roles())
            role = discord.utils.get(roles, id=snowflake)
        if role is None:
            raise NotFoundError(f"Role {role_id} not found in guild {guild.id}")
        return role

    async def delete_role(self, guild_id: str, role_id: str, reason: str) -> None:
        guild = await self.fetch_guild(guild_id)
        role = await self._fetch_role(guild, role_id)
        await _call(role.delete(reason=reason))

    async def fetch_role_members(self, guild_id: str, role_id: str) -> RoleMembers:
        snowflake = _snowflake(guild_id)
        guild = self._client.get_guild(snowflake)
        if guild is not None:
            role = await self._fetch_role(guild, role_id)
            members = list(role.members)
        else:
            # Fetched guilds come without members; page through them instead.
            guild = await _call(self._client.fetch_guild(snowflake))
            role = await self._fetch_role(guild, role_id)
            members = await _call(self._fetch_role_holders(guild, role.id))
        names = [escape_markdown(member.display_name) for member in members]
        return RoleMembers(mention=role.mention, display_names=names)

    @staticmethod
    async def _fetch_role_holders(guild: discord.Guild, role_id: int) -> list[discord.Member]:
        return [
            member
            async for member in guild.fetch_members(limit=None)
            if member.get_role(role_id) is not None
        ]

    async def _fetch_member(self, guild_id: str, user_id: str) -> discord.Member:
        guild = await self.fetch_guild(guild_id)
        snowflake = _snowflake(user_id)
        member = guild.get_member(snowflake)
        if member is not None:
            return member
        return await _call(guild.fetch_member(snowflake))

    async def add_member_role(self, guild_id: str, user_id: str, role_id: str, reason: str) -> None:
        member = await self._fetch_member(guild_id, user_id)
        await _call(member.add_roles(discord.Object(id=_snowflake(role_id)), reason=reason))

    async def remove_member_role(self, guild_id: str, user_id: str, role_id: str, reason: str) -> None:
        member = await self._fetch_member(guild_id, user_id)
        await _call(member.remove_roles(discord.Object(id=_snowflake(role_id)), reason=reason))

    async def reply(self, context: CommandContext, text: str) -> None:
        await _call(context.handle.reply(text))

    async def send(self, context: CommandContext, text: str) -> SentMessage:
        sent = await _call(context.handle.channel.send(text))
        return SentMessage(channel_id=str(sent.channel.id), message_id=str(sent.id), handle=sent)

    async def delete_message(self, message: SentMessage) -> None:
        await _call(message.handle.delete())
