from __future__ import annotations

import typing
import typing_extensions

from .users import User


class BaseChannel(typing.TypedDict):
    id: str
    type: int


class GuildChannel(BaseChannel):
    guild_id: typing_extensions.NotRequired[str]
    name: str
    position: typing_extensions.NotRequired[int]
    parent_id: typing_extensions.NotRequired[typing.Optional[str]]
    nsfw: typing_extensions.NotRequired[bool]
    permission_overwrites: typing_extensions.NotRequired[list[dict[str, typing.Any]]]


class TextChannel(GuildChannel):
    topic: typing_extensions.NotRequired[typing.Optional[str]]
    last_message_id: typing_extensions.NotRequired[typing.Optional[str]]
    rate_limit_per_user: typing_extensions.NotRequired[int]


class VoiceChannel(GuildChannel):
    bitrate: typing_extensions.NotRequired[int]
    user_limit: typing_extensions.NotRequired[int]
    rtc_region: typing_extensions.NotRequired[typing.Optional[str]]
    last_message_id: typing_extensions.NotRequired[typing.Optional[str]]


class ThreadMetadata(typing.TypedDict):
    archived: bool
    auto_archive_duration: int
    archive_timestamp: str
    locked: bool


class ThreadChannel(GuildChannel):
    owner_id: typing_extensions.NotRequired[str]
    message_count: typing_extensions.NotRequired[int]
    member_count: typing_extensions.NotRequired[int]
    thread_metadata: typing_extensions.NotRequired[ThreadMetadata]
    last_message_id: typing_extensions.NotRequired[typing.Optional[str]]


class DMChannel(BaseChannel):
    recipients: typing_extensions.NotRequired[list[User]]
    last_message_id: typing_extensions.NotRequired[typing.Optional[str]]


Channel = typing.Union[TextChannel, VoiceChannel, ThreadChannel, DMChannel, GuildChannel]
