from __future__ import annotations

import typing
import typing_extensions


class User(typing.TypedDict):
    id: str
    username: str
    discriminator: str
    global_name: typing.Optional[str]
    avatar: typing.Optional[str]
    bot: typing_extensions.NotRequired[bool]
    system: typing_extensions.NotRequired[bool]
    banner: typing_extensions.NotRequired[typing.Optional[str]]
    accent_color: typing_extensions.NotRequired[typing.Optional[int]]
    public_flags: typing_extensions.NotRequired[int]


class ClientUser(User):
    mfa_enabled: typing_extensions.NotRequired[bool]
    locale: typing_extensions.NotRequired[str]
    verified: typing_extensions.NotRequired[bool]
    email: typing_extensions.NotRequired[typing.Optional[str]]
    flags: typing_extensions.NotRequired[int]


class DataEditUser(typing.TypedDict):
    username: typing_extensions.NotRequired[str]
    avatar: typing_extensions.NotRequired[typing.Optional[str]]
