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
import typing

from . import routes
from .base import Base
from .cache import Collection
from .enums import ChannelType
from .payloads import MessagePayload

if typing.TYPE_CHECKING:
    from .errors import HTTPException
    from .guild import Guild
    from .http import Response
    from .message import Message


@define(slots=True, eq=False)
class BaseChannel(Base):
    """Represents a channel."""

    raw_type: int = field(repr=False, kw_only=True)
    """:class:`int`: The channel type raw value."""

    @property
    def type(self) -> typing.Union[ChannelType, int]:
        """Union[:class:`ChannelType`, :class:`int`]: The channel type. Unknown types are returned as is."""
        return ChannelType.try_value(self.raw_type)

    @property
    def mention(self) -> str:
        """:class:`str`: The channel mention."""
        return f'<#{self.id}>'

    def locally_update(self, data: dict[str, typing.Any], /) -> None:
        pass

    async def delete(self, *, reason: typing.Optional[str] = None) -> Response:
        """|coro|

        Deletes the channel, or closes the DM.
        """
        response = await self.state.http.request(
            routes.CHANNELS_CHANNEL_DELETE.compile(channel_id=self.id),
            reason=reason,
        )
        if response.error is None:
            self.state.channels.delete(self.id)
            guild = self.state.guilds.get(getattr(self, 'guild_id', None))
            if guild is not None:
                guild.channels.cache.delete(self.id)
        return response


class Textable:
    """Mixin for channels that messages can be sent to."""

    __slots__ = ()

    if typing.TYPE_CHECKING:
        id: str
        state: typing.Any

    async def send(self, data: typing.Any = None, /, files: typing.Any = None) -> typing.Union[Message, HTTPException]:
        """|coro|

        Sends a message to the channel.

        Parameters
        ----------
        data: Union[:class:`str`, Mapping[:class:`str`, Any]]
            The message content, or the options. See :class:`MessagePayload`.
        files: Optional[Union[:class:`File`, List[:class:`File`]]]
            The files to upload.

        Returns
        -------
        Union[:class:`Message`, :class:`HTTPException`]
            The message that was sent, or the error.
        """
        payload = MessagePayload(data, files)
        response = await self.state.http.send_message(self.id, payload.build(), files=payload.files)
        if response.error is not None:
            return response.error
        return self.state.parser.parse_message(response.data)

    async def fetch_message(self, message_id: str, /) -> Message:
        """|coro|

        Retrieves a message.

        Raises
        ------
        :class:`HTTPException`
            Fetching the message failed.
        """
        response = await self.state.http.request(
            routes.CHANNELS_MESSAGE_FETCH.compile(channel_id=self.id, message_id=message_id)
        )
        return self.state.parser.parse_message(response.unwrap())


@define(slots=True, eq=False)
class GuildChannel(BaseChannel):
    """Represents a channel in a guild."""

    guild_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The guild's ID the channel belongs to."""

    name: str = field(repr=True, kw_only=True)
    """:class:`str`: The channel name."""

    position: int = field(repr=False, kw_only=True, default=0)
    parent_id: typing.Optional[str] = field(repr=False, kw_only=True, default=None)
    """Optional[:class:`str`]: The parent category's ID."""

    nsfw: bool = field(repr=False, kw_only=True, default=False)

    def __str__(self) -> str:
        return self.name

    def locally_update(self, data: dict[str, typing.Any], /) -> None:
        if 'name' in data:
            self.name = data['name']
        if 'position' in data:
            self.position = data['position']
        if 'parent_id' in data:
            self.parent_id = data['parent_id']
        if 'nsfw' in data:
            self.nsfw = data['nsfw']

    @property
    def guild(self) -> typing.Optional[Guild]:
        """Optional[:class:`Guild`]: The guild the channel belongs to, if cached."""
        return self.state.guilds.get(self.guild_id)

    @property
    def category(self) -> typing.Optional[CategoryChannel]:
        """Optional[:class:`CategoryChannel`]: The parent category, if cached."""
        if self.parent_id is None:
            return None
        channel = self.state.channels.get(self.parent_id)
        return channel if isinstance(channel, CategoryChannel) else None


@define(slots=True, eq=False)
class TextChannel(GuildChannel, Textable):
    """Represents a guild text or announcement channel."""

    topic: typing.Optional[str] = field(repr=False, kw_only=True, default=None)
    last_message_id: typing.Optional[str] = field(repr=False, kw_only=True, default=None)
    rate_limit_per_user: int = field(repr=False, kw_only=True, default=0)

    def locally_update(self, data: dict[str, typing.Any], /) -> None:
        GuildChannel.locally_update(self, data)
        if 'topic' in data:
            self.topic = data['topic']
        if 'last_message_id' in data:
            self.last_message_id = data['last_message_id']
        if 'rate_limit_per_user' in data:
            self.rate_limit_per_user = data['rate_limit_per_user']


@define(slots=True, eq=False)
class VoiceChannel(GuildChannel, Textable):
    """Represents a guild voice or stage channel."""

    bitrate: int = field(repr=False, kw_only=True, default=64000)
    user_limit: int = field(repr=False, kw_only=True, default=0)
    rtc_region: typing.Optional[str] = field(repr=False, kw_only=True, default=None)


@define(slots=True, eq=False)
class CategoryChannel(GuildChannel):
    """Represents a guild category."""

    @property
    def channels(self) -> Collection[str, GuildChannel]:
        """:class:`Collection`: The cached channels in this category."""
        guild = self.guild
        if guild is None:
            return Collection()
        return guild.channels.cache.filter(lambda channel: channel.parent_id == self.id)


@define(slots=True, eq=False)
class ThreadChannel(GuildChannel, Textable):
    """Represents a thread."""

    owner_id: typing.Optional[str] = field(repr=False, kw_only=True, default=None)
    message_count: int = field(repr=False, kw_only=True, default=0)
    member_count: int = field(repr=False, kw_only=True, default=0)
    archived: bool = field(repr=False, kw_only=True, default=False)
    locked: bool = field(repr=False, kw_only=True, default=False)

    @property
    def parent(self) -> typing.Optional[GuildChannel]:
        """Optional[:class:`GuildChannel`]: The channel the thread was created in, if cached."""
        if self.parent_id is None:
            return None
        return self.state.channels.get(self.parent_id)  # type: ignore


@define(slots=True, eq=False)
class DMChannel(BaseChannel, Textable):
    """Represents a private channel."""

    recipient_ids: tuple[str, ...] = field(repr=True, kw_only=True, converter=tuple)
    last_message_id: typing.Optional[str] = field(repr=False, kw_only=True, default=None)


Channel = typing.Union[TextChannel, VoiceChannel, CategoryChannel, ThreadChannel, DMChannel, GuildChannel]

__all__ = (
    'BaseChannel',
    'Textable',
    'GuildChannel',
    'TextChannel',
    'VoiceChannel',
    'CategoryChannel',
    'ThreadChannel',
    'DMChannel',
    'Channel',
)
