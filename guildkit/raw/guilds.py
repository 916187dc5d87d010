from __future__ import annotations

import typing
import typing_extensions

from .channels import GuildChannel
from .users import User


class RoleTags(typing.TypedDict):
    bot_id: typing_extensions.NotRequired[str]
    integration_id: typing_extensions.NotRequired[str]
    premium_subscriber: typing_extensions.NotRequired[None]
    subscription_listing_id: typing_extensions.NotRequired[str]
    available_for_purchase: typing_extensions.NotRequired[None]
    guild_connections: typing_extensions.NotRequired[None]


class Role(typing.TypedDict):
    id: str
    name: str
    color: int
    hoist: bool
    icon: typing_extensions.NotRequired[typing.Optional[str]]
    unicode_emoji: typing_extensions.NotRequired[typing.Optional[str]]
    position: int
    permissions: str
    managed: bool
    mentionable: bool
    tags: typing_extensions.NotRequired[RoleTags]
    flags: typing_extensions.NotRequired[int]


class DataEditRole(typing.TypedDict):
    name: typing_extensions.NotRequired[typing.Optional[str]]
    permissions: typing_extensions.NotRequired[typing.Optional[str]]
    color: typing_extensions.NotRequired[typing.Optional[int]]
    hoist: typing_extensions.NotRequired[typing.Optional[bool]]
    icon: typing_extensions.NotRequired[typing.Optional[str]]
    unicode_emoji: typing_extensions.NotRequired[typing.Optional[str]]
    mentionable: typing_extensions.NotRequired[typing.Optional[bool]]


class Member(typing.TypedDict):
    user: typing_extensions.NotRequired[User]
    nick: typing_extensions.NotRequired[typing.Optional[str]]
    avatar: typing_extensions.NotRequired[typing.Optional[str]]
    roles: list[str]
    joined_at: typing.Optional[str]
    premium_since: typing_extensions.NotRequired[typing.Optional[str]]
    deaf: bool
    mute: bool
    flags: int
    pending: typing_extensions.NotRequired[bool]
    permissions: typing_extensions.NotRequired[str]
    communication_disabled_until: typing_extensions.NotRequired[typing.Optional[str]]


class Guild(typing.TypedDict):
    id: str
    name: str
    icon: typing.Optional[str]
    description: typing_extensions.NotRequired[typing.Optional[str]]
    owner_id: str
    roles: list[Role]
    features: list[str]
    preferred_locale: typing_extensions.NotRequired[str]
    channels: typing_extensions.NotRequired[list[GuildChannel]]
    members: typing_extensions.NotRequired[list[Member]]
