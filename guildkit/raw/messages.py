from __future__ import annotations

import typing
import typing_extensions

from .users import User


class Attachment(typing.TypedDict):
    id: str
    filename: str
    description: typing_extensions.NotRequired[str]
    content_type: typing_extensions.NotRequired[str]
    size: int
    url: str
    proxy_url: str


class MessageReference(typing.TypedDict):
    message_id: typing_extensions.NotRequired[str]
    channel_id: typing_extensions.NotRequired[str]
    guild_id: typing_extensions.NotRequired[str]
    fail_if_not_exists: typing_extensions.NotRequired[bool]


AllowedMentionType = typing.Literal['users', 'roles', 'everyone']


class AllowedMentions(typing.TypedDict):
    parse: typing_extensions.NotRequired[list[AllowedMentionType]]
    users: typing_extensions.NotRequired[typing.Optional[list[str]]]
    roles: typing_extensions.NotRequired[typing.Optional[list[str]]]
    replied_user: typing_extensions.NotRequired[bool]


class PartialAttachment(typing.TypedDict):
    id: typing.Union[int, str]
    filename: typing_extensions.NotRequired[str]
    description: typing_extensions.NotRequired[typing.Optional[str]]


class DataMessageSend(typing.TypedDict):
    content: str
    tts: bool
    embeds: typing.Optional[list[dict[str, typing.Any]]]
    allowed_mentions: typing.Optional[AllowedMentions]
    message_reference: typing.Optional[MessageReference]
    components: typing.Optional[list[dict[str, typing.Any]]]
    sticker_ids: typing.Optional[list[str]]
    flags: typing.Optional[int]
    attachments: typing.Optional[list[PartialAttachment]]
    nonce: typing_extensions.NotRequired[typing.Union[int, str]]


class Message(typing.TypedDict):
    id: str
    channel_id: str
    guild_id: typing_extensions.NotRequired[str]
    author: User
    content: str
    timestamp: str
    edited_timestamp: typing.Optional[str]
    tts: bool
    mention_everyone: bool
    mentions: list[User]
    mention_roles: list[str]
    attachments: list[Attachment]
    embeds: list[dict[str, typing.Any]]
    pinned: bool
    webhook_id: typing_extensions.NotRequired[str]
    type: int
    application_id: typing_extensions.NotRequired[str]
    flags: typing_extensions.NotRequired[int]
    message_reference: typing_extensions.NotRequired[MessageReference]
    components: typing_extensions.NotRequired[list[dict[str, typing.Any]]]
