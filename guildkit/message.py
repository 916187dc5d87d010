"""
The MIT License (MIT)

Copyright (c) 2024-present MCausc78

Permission is hereby granted, free of charge, to any person obtaining a
copy of this software and associated documentation files (the "Software"),
to deal in the Software without restriction, including without limitation
the rights to use, copy, modify, merge, publish, distribute, sublicense,
and/or sell copies of the Software, and to permit persons to whom the
Software is furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS
OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER
DEALINGS IN THE SOFTWARE.
"""

from __future__ import annotations

from attrs import define, field
from datetime import datetime
import typing

from .base import Base
from .flags import MessageFlags
from .payloads import EditMessagePayload, MessagePayload
from .utils import parse_time

if typing.TYPE_CHECKING:
    from .channel import Channel
    from .errors import HTTPException
    from .guild import Guild, Member
    from .http import Response
    from .user import User


@define(slots=True, eq=False)
class Message(Base):
    """Represents a message in channel."""

    channel_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The channel's ID the message was sent in."""

    guild_id: typing.Optional[str] = field(repr=False, kw_only=True)
    """Optional[:class:`str`]: The guild's ID the message was sent in."""

    author: User = field(repr=True, kw_only=True)
    """:class:`User`: The message author."""

    content: str = field(repr=True, kw_only=True)
    """:class:`str`: The message content."""

    tts: bool = field(repr=False, kw_only=True)
    embeds: list[dict[str, typing.Any]] = field(repr=False, kw_only=True)
    attachments: list[dict[str, typing.Any]] = field(repr=False, kw_only=True)
    components: list[dict[str, typing.Any]] = field(repr=False, kw_only=True)

    mention_ids: tuple[str, ...] = field(repr=False, kw_only=True, converter=tuple)
    """Tuple[:class:`str`, ...]: The IDs of users mentioned in message."""

    role_mention_ids: tuple[str, ...] = field(repr=False, kw_only=True, converter=tuple)
    mention_everyone: bool = field(repr=False, kw_only=True)

    raw_flags: int = field(repr=False, kw_only=True)
    """:class:`int`: The message flags raw value."""

    timestamp: typing.Optional[datetime] = field(repr=False, kw_only=True)
    edited_at: typing.Optional[datetime] = field(repr=False, kw_only=True)

    reference_id: typing.Optional[str] = field(repr=False, kw_only=True)
    """Optional[:class:`str`]: The ID of message this one replies to."""

    webhook_id: typing.Optional[str] = field(repr=False, kw_only=True)
    application_id: typing.Optional[str] = field(repr=False, kw_only=True)

    def __str__(self) -> str:
        return self.content

    def locally_update(self, data: dict[str, typing.Any], /) -> None:
        if 'content' in data:
            self.content = data['content']
        if 'embeds' in data:
            self.embeds = data['embeds']
        if 'attachments' in data:
            self.attachments = data['attachments']
        if 'components' in data:
            self.components = data['components']
        if 'flags' in data:
            self.raw_flags = data['flags']
        if 'edited_timestamp' in data:
            self.edited_at = parse_time(data['edited_timestamp'])

    @property
    def flags(self) -> MessageFlags:
        """:class:`MessageFlags`: The message flags."""
        return MessageFlags(self.raw_flags)

    @property
    def channel(self) -> typing.Optional[Channel]:
        """Optional[:class:`Channel`]: The channel the message was sent in, if cached."""
        return self.state.channels.get(self.channel_id)

    @property
    def guild(self) -> typing.Optional[Guild]:
        if self.guild_id is None:
            return None
        return self.state.guilds.get(self.guild_id)

    @property
    def member(self) -> typing.Optional[Member]:
        """Optional[:class:`Member`]: The author as guild member, if cached."""
        guild = self.guild
        if guild is None:
            return None
        return guild.members.cache.get(self.author.id)

    @property
    def jump_url(self) -> str:
        return f'https://discord.com/channels/{self.guild_id or "@me"}/{self.channel_id}/{self.id}'

    async def reply(
        self, data: typing.Any = None, /, files: typing.Any = None, *, mention: bool = False
    ) -> typing.Union[Message, HTTPException]:
        """|coro|

        Replies to this message.

        Parameters
        ----------
        data: Union[:class:`str`, Mapping[:class:`str`, Any]]
            The message content, or the options. See :class:`MessagePayload`.
        files: Optional[Union[:class:`File`, List[:class:`File`]]]
            The files to upload.
        mention: :class:`bool`
            Whether to mention the author of this message.
        """
        options = {'content': data} if isinstance(data, str) else dict(data or {})
        options['reply'] = {'id': self.id, 'mention': mention}
        payload = MessagePayload(options, files)

        response = await self.state.http.send_message(self.channel_id, payload.build(), files=payload.files)
        if response.error is not None:
            return response.error
        return self.state.parser.parse_message(response.data)

    async def edit(self, data: typing.Any = None, /, files: typing.Any = None) -> typing.Union[Message, HTTPException]:
        """|coro|

        Edits the message. Only given options are changed.

        Returns
        -------
        Union[:class:`Message`, :class:`HTTPException`]
            The edited message, or the error.
        """
        payload = EditMessagePayload(data, files)
        response = await self.state.http.edit_message(self.channel_id, self.id, payload.build(), files=payload.files)
        if response.error is not None:
            return response.error
        self.locally_update(response.data)
        return self

    async def delete(self, *, reason: typing.Optional[str] = None) -> Response:
        """|coro|

        Deletes the message.
        """
        return await self.state.http.delete_message(self.channel_id, self.id, reason=reason)


@define(slots=True, eq=False)
class InteractionResponse(Message):
    """Represents a message sent in response to an interaction.

    Edits and deletion go through the interaction webhook, so they work
    for ephemeral messages too.
    """

    token: str = field(repr=False, kw_only=True)
    """:class:`str`: The interaction token."""

    interaction_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The interaction's ID."""

    interaction_application_id: str = field(repr=False, kw_only=True)
    """:class:`str`: The application's ID that received the interaction."""

    async def edit(self, data: typing.Any = None, /, files: typing.Any = None) -> typing.Union[Message, HTTPException]:
        """|coro|

        Edits the response message.

        Returns
        -------
        Union[:class:`InteractionResponse`, :class:`HTTPException`]
            The edited message, or the error.
        """
        payload = EditMessagePayload(data, files)
        response = await self.state.http.edit_webhook_message(
            self.interaction_application_id, self.token, self.id, payload.build(), files=payload.files
        )
        if response.error is not None:
            return response.error
        self.locally_update(response.data)
        return self

    async def delete(self) -> Response:  # type: ignore[override]
        """|coro|

        Deletes the response message. Webhook deletes carry no audit log reason.
        """
        return await self.state.http.delete_webhook_message(self.interaction_application_id, self.token, self.id)


__all__ = (
    'Message',
    'InteractionResponse',
)
