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
from enum import Enum
import typing

from .base import Base
from .cache import Collection
from .enums import ApplicationCommandType, ComponentType, InteractionResponseType, InteractionType
from .errors import InteractionNotResponded, InteractionResponded
from .flags import MessageFlags, Permissions
from .payloads import EditMessagePayload, InteractionPayload, ModalPayload

if typing.TYPE_CHECKING:
    from .channel import Channel
    from .errors import HTTPException
    from .guild import Guild, Member
    from .http import Response
    from .message import InteractionResponse, Message
    from .user import User


class InteractionResponseState(Enum):
    """Describes the lifecycle of interaction response."""

    received = 'received'
    """Nothing was sent yet."""

    deferred = 'deferred'
    """The response was deferred, the user sees a loading state."""

    replied = 'replied'
    """The initial message was sent."""

    modal = 'modal'
    """A modal was shown instead of message."""


@define(slots=True, eq=False)
class Interaction(Base):
    """Represents an interaction.

    Responding moves it through :class:`InteractionResponseState`. The service
    invalidates the token after a while; this is reported by transport as an
    error, the library does not track time itself.
    """

    raw_type: int = field(repr=True, kw_only=True)
    """:class:`int`: The interaction type raw value."""

    application_id: str = field(repr=False, kw_only=True)
    """:class:`str`: The ID of application the interaction was sent to."""

    token: str = field(repr=False, kw_only=True)
    """:class:`str`: The continuation token for responding."""

    guild_id: typing.Optional[str] = field(repr=True, kw_only=True)
    channel_id: typing.Optional[str] = field(repr=True, kw_only=True)

    member: typing.Optional[Member] = field(repr=False, kw_only=True)
    """Optional[:class:`Member`]: The member who invoked the interaction. ``None`` in DMs."""

    user: User = field(repr=True, kw_only=True)
    """:class:`User`: The user who invoked the interaction."""

    raw_app_permissions: int = field(repr=False, kw_only=True)
    locale: typing.Optional[str] = field(repr=False, kw_only=True)
    guild_locale: typing.Optional[str] = field(repr=False, kw_only=True)

    data: dict[str, typing.Any] = field(repr=False, kw_only=True)
    """Dict[:class:`str`, Any]: The raw interaction data."""

    message: typing.Optional[Message] = field(repr=False, kw_only=True, default=None)
    """Optional[:class:`Message`]: The message the component was attached to."""

    response_state: InteractionResponseState = field(
        repr=False, kw_only=True, default=InteractionResponseState.received
    )
    """:class:`InteractionResponseState`: How far the response went."""

    @property
    def type(self) -> typing.Union[InteractionType, int]:
        return InteractionType.try_value(self.raw_type)

    @property
    def author(self) -> User:
        """:class:`User`: An alias for :attr:`user`."""
        return self.user

    @property
    def guild(self) -> typing.Optional[Guild]:
        """Optional[:class:`Guild`]: The guild the interaction was sent from, if cached."""
        if self.guild_id is None:
            return None
        return self.state.guilds.get(self.guild_id)

    @property
    def channel(self) -> typing.Optional[Channel]:
        """Optional[:class:`Channel`]: The channel the interaction was sent from, if cached."""
        if self.channel_id is None:
            return None
        return self.state.channels.get(self.channel_id)

    @property
    def app_permissions(self) -> Permissions:
        """:class:`Permissions`: The permissions the application has in the channel."""
        return Permissions(self.raw_app_permissions)

    def is_component(self) -> bool:
        """:class:`bool`: Whether the interaction came from a component or modal."""
        return bool(self.data.get('custom_id'))

    def is_slash(self) -> bool:
        """:class:`bool`: Whether the interaction is a chat input command."""
        return self.data.get('type') == ApplicationCommandType.slash

    def is_user(self) -> bool:
        """:class:`bool`: Whether the interaction is a user context menu command."""
        return self.data.get('type') == ApplicationCommandType.user

    def is_message(self) -> bool:
        """:class:`bool`: Whether the interaction is a message context menu command."""
        return self.data.get('type') == ApplicationCommandType.message

    def is_responded(self) -> bool:
        return self.response_state is not InteractionResponseState.received

    def _wrap_response(self, data: dict[str, typing.Any], /) -> InteractionResponse:
        if self.guild_id is not None:
            data.setdefault('guild_id', self.guild_id)
        return self.state.parser.parse_interaction_response(data, self)

    def _ensure_not_responded(self) -> None:
        if self.response_state is not InteractionResponseState.received:
            raise InteractionResponded(self.id)

    def _ensure_responded(self) -> None:
        if self.response_state not in (InteractionResponseState.deferred, InteractionResponseState.replied):
            raise InteractionNotResponded(self.id)

    async def reply(
        self,
        data: typing.Any = None,
        /,
        files: typing.Any = None,
        *,
        ephemeral: bool = False,
        fetch_reply: bool = False,
    ) -> typing.Union[Response, InteractionResponse]:
        """|coro|

        Responds to the interaction with a message.

        Parameters
        ----------
        data: Union[:class:`str`, Mapping[:class:`str`, Any]]
            The message content, or the options. See :class:`InteractionPayload`.
            The ``ephemeral``, ``fetch_reply`` and ``fetch_response`` options are honored too.
        files: Optional[Union[:class:`File`, List[:class:`File`]]]
            The files to upload.
        ephemeral: :class:`bool`
            Whether only the invoking user should see the message.
        fetch_reply: :class:`bool`
            Whether to retrieve the sent message afterwards.

        Raises
        ------
        :class:`InteractionResponded`
            The interaction was already responded to.

        Returns
        -------
        Union[:class:`Response`, :class:`InteractionResponse`]
            The sent message if ``fetch_reply`` was set and it could be retrieved, the transport response otherwise.
        """
        self._ensure_not_responded()

        options = {'content': data} if isinstance(data, str) else dict(data or {})
        if ephemeral:
            options['ephemeral'] = True
        fetch_reply = fetch_reply or bool(options.get('fetch_reply') or options.get('fetch_response'))

        payload = InteractionPayload(options, files)
        response = await self.state.http.create_interaction_response(
            self.id,
            self.token,
            {'type': InteractionResponseType.channel_message.value, 'data': payload.build()},
            files=payload.files,
        )
        if response.error is not None:
            return response

        self.response_state = InteractionResponseState.replied

        if not fetch_reply:
            return response

        original = await self.state.http.get_webhook_message(self.application_id, self.token)
        if original.error is not None:
            return original
        return self._wrap_response(original.data)

    async def defer_reply(self, ephemeral: bool = False) -> Response:
        """|coro|

        Acknowledges the interaction, showing a loading state to the user.

        Parameters
        ----------
        ephemeral: :class:`bool`
            Whether the eventual message should be seen only by the invoking user.

        Raises
        ------
        :class:`InteractionResponded`
            The interaction was already responded to.
        """
        self._ensure_not_responded()

        flags = MessageFlags.ephemeral.value if ephemeral is True else 0
        response = await self.state.http.create_interaction_response(
            self.id,
            self.token,
            {'type': InteractionResponseType.deferred_channel_message.value, 'data': {'flags': flags}},
        )
        if response.error is None:
            self.response_state = InteractionResponseState.deferred
        return response

    async def edit_reply(
        self, data: typing.Any = None, /, files: typing.Any = None
    ) -> typing.Union[InteractionResponse, HTTPException]:
        """|coro|

        Edits the original response.

        Raises
        ------
        :class:`InteractionNotResponded`
            Nothing was sent yet.

        Returns
        -------
        Union[:class:`InteractionResponse`, :class:`HTTPException`]
            The edited message, or the error.
        """
        self._ensure_responded()

        payload = EditMessagePayload(data, files)
        response = await self.state.http.edit_webhook_message(
            self.application_id, self.token, '@original', payload.build(), files=payload.files
        )
        if response.error is not None:
            return response.error
        return self._wrap_response(response.data)

    async def follow_up(
        self,
        data: typing.Any = None,
        /,
        files: typing.Any = None,
        *,
        ephemeral: bool = False,
    ) -> typing.Union[InteractionResponse, HTTPException]:
        """|coro|

        Sends an additional message.

        Parameters
        ----------
        data: Union[:class:`str`, Mapping[:class:`str`, Any]]
            The message content, or the options. See :class:`InteractionPayload`.
        files: Optional[Union[:class:`File`, List[:class:`File`]]]
            The files to upload.
        ephemeral: :class:`bool`
            Whether only the invoking user should see the message.

        Raises
        ------
        :class:`InteractionNotResponded`
            Nothing was sent yet.

        Returns
        -------
        Union[:class:`InteractionResponse`, :class:`HTTPException`]
            The sent message, or the error.
        """
        self._ensure_responded()

        options = {'content': data} if isinstance(data, str) else dict(data or {})
        if ephemeral:
            options['ephemeral'] = True

        payload = InteractionPayload(options, files)
        response = await self.state.http.execute_webhook(
            self.application_id, self.token, payload.build(), files=payload.files
        )
        if response.error is not None:
            return response.error
        return self._wrap_response(response.data)

    async def modal(self, data: typing.Any, /) -> Response:
        """|coro|

        Responds to the interaction with a modal.

        Parameters
        ----------
        data: Mapping[:class:`str`, Any]
            The modal options. See :class:`ModalPayload`.

        Raises
        ------
        :class:`InteractionResponded`
            The interaction was already responded to.
        """
        self._ensure_not_responded()

        payload = ModalPayload(data)
        response = await self.state.http.create_interaction_response(
            self.id,
            self.token,
            {'type': InteractionResponseType.modal.value, 'data': payload.build()},
        )
        if response.error is None:
            self.response_state = InteractionResponseState.modal
        return response

    show_modal = modal

    async def fetch_reply(self) -> InteractionResponse:
        """|coro|

        Retrieves the original response.

        Raises
        ------
        :class:`InteractionNotResponded`
            Nothing was sent yet.
        :class:`HTTPException`
            Retrieving the message failed.
        """
        self._ensure_responded()
        response = await self.state.http.get_webhook_message(self.application_id, self.token)
        return self._wrap_response(response.unwrap())

    async def delete_reply(self) -> Response:
        """|coro|

        Deletes the original response.

        Raises
        ------
        :class:`InteractionNotResponded`
            Nothing was sent yet.
        """
        self._ensure_responded()
        return await self.state.http.delete_webhook_message(self.application_id, self.token)


@define(slots=True, eq=False)
class ApplicationCommandInteraction(Interaction):
    """Represents an application command invocation."""

    @property
    def command_id(self) -> str:
        return self.data['id']

    @property
    def command_name(self) -> str:
        """:class:`str`: The invoked command name."""
        return self.data['name']

    @property
    def command_type(self) -> typing.Union[ApplicationCommandType, int]:
        return ApplicationCommandType.try_value(self.data.get('type', 1))

    @property
    def target_id(self) -> typing.Optional[str]:
        """Optional[:class:`str`]: The user or message ID the context menu command targets."""
        return self.data.get('target_id')

    @property
    def options(self) -> list[dict[str, typing.Any]]:
        """List[Dict[:class:`str`, Any]]: The raw command options."""
        return self.data.get('options', [])

    def get_option(self, name: str, /, default: typing.Any = None) -> typing.Any:
        """Returns a top-level option value by name."""
        for option in self.options:
            if option['name'] == name:
                return option.get('value', default)
        return default


@define(slots=True, eq=False)
class ComponentInteraction(Interaction):
    """Represents a button click or select menu choice."""

    @property
    def custom_id(self) -> str:
        """:class:`str`: The component's custom ID."""
        return self.data['custom_id']

    @property
    def component_type(self) -> typing.Union[ComponentType, int, None]:
        raw_type = self.data.get('component_type')
        return None if raw_type is None else ComponentType.try_value(raw_type)

    @property
    def values(self) -> list[str]:
        """List[:class:`str`]: The selected values. Empty for buttons."""
        return self.data.get('values', [])


@define(slots=True, eq=False)
class ModalSubmitInteraction(ComponentInteraction):
    """Represents a submitted modal."""

    inputs: Collection[str, typing.Optional[str]] = field(repr=False, init=False)
    """:class:`Collection`: The submitted text input values, keyed by custom ID."""

    def __attrs_post_init__(self) -> None:
        inputs: Collection[str, typing.Optional[str]] = Collection()
        for row in self.data.get('components', ()):
            for component in row.get('components', ()):
                if component.get('type') == ComponentType.text_input:
                    inputs.set(component['custom_id'], component.get('value'))
        self.inputs = inputs

    def get_input(self, custom_id: str, /) -> typing.Optional[str]:
        return self.inputs.get(custom_id)


__all__ = (
    'InteractionResponseState',
    'Interaction',
    'ApplicationCommandInteraction',
    'ComponentInteraction',
    'ModalSubmitInteraction',
)
