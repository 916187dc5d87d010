from __future__ import annotations

import typing
import typing_extensions

from .guilds import Member
from .messages import Message
from .users import User


class ApplicationCommandInteractionDataOption(typing.TypedDict):
    name: str
    type: int
    value: typing_extensions.NotRequired[typing.Union[str, int, float, bool]]
    options: typing_extensions.NotRequired[list[ApplicationCommandInteractionDataOption]]
    focused: typing_extensions.NotRequired[bool]


class ApplicationCommandInteractionData(typing.TypedDict):
    id: str
    name: str
    type: int
    options: typing_extensions.NotRequired[list[ApplicationCommandInteractionDataOption]]
    guild_id: typing_extensions.NotRequired[str]
    target_id: typing_extensions.NotRequired[str]


class MessageComponentInteractionData(typing.TypedDict):
    custom_id: str
    component_type: int
    values: typing_extensions.NotRequired[list[str]]


class TextInputComponent(typing.TypedDict):
    type: typing.Literal[4]
    custom_id: str
    style: typing_extensions.NotRequired[int]
    label: typing_extensions.NotRequired[str]
    min_length: typing_extensions.NotRequired[int]
    max_length: typing_extensions.NotRequired[int]
    required: typing_extensions.NotRequired[bool]
    value: typing_extensions.NotRequired[str]
    placeholder: typing_extensions.NotRequired[str]


class ActionRow(typing.TypedDict):
    type: typing.Literal[1]
    components: list[typing.Any]


class ModalSubmitInteractionData(typing.TypedDict):
    custom_id: str
    components: list[ActionRow]


class Interaction(typing.TypedDict):
    id: str
    application_id: str
    type: int
    data: typing_extensions.NotRequired[
        typing.Union[ApplicationCommandInteractionData, MessageComponentInteractionData, ModalSubmitInteractionData]
    ]
    guild_id: typing_extensions.NotRequired[str]
    channel_id: typing_extensions.NotRequired[str]
    member: typing_extensions.NotRequired[Member]
    user: typing_extensions.NotRequired[User]
    token: str
    version: int
    message: typing_extensions.NotRequired[Message]
    app_permissions: typing_extensions.NotRequired[str]
    locale: typing_extensions.NotRequired[str]
    guild_locale: typing_extensions.NotRequired[str]


class InteractionResponse(typing.TypedDict):
    type: int
    data: typing_extensions.NotRequired[dict[str, typing.Any]]


class DataModal(typing.TypedDict):
    custom_id: str
    title: str
    components: list[ActionRow]
