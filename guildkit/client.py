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

import logging
import typing

import aiohttp

from . import utils
from .core import UNDEFINED, UndefinedOr, IDOr, resolve_id
from .http import HTTPClient
from .parser import Parser
from .state import State

if typing.TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from typing_extensions import Self

    from . import raw
    from .cache import Collection
    from .channel import Channel
    from .guild import Guild
    from .interaction import Interaction
    from .user import ClientUser, User


_L = logging.getLogger(__name__)


def _session_factory(_) -> aiohttp.ClientSession:
    return aiohttp.ClientSession()


class Client:
    """A Discord API client.

    The client owns the :class:`State` every entity is bound to. Nothing is
    sent until a method needs it: the HTTP session is opened on first request.
    """

    __slots__ = (
        '_state',
        '_token',
        'bot',
        'closed',
    )

    def __init__(
        self,
        token: str = '',
        *,
        bot: bool = True,
        api_version: int = 10,
        http_base: typing.Optional[str] = None,
        http: typing.Optional[Callable[[Client, State], HTTPClient]] = None,
        max_retries: typing.Optional[int] = None,
        parser: typing.Optional[Callable[[Client, State], Parser]] = None,
        populate_managers: bool = True,
        state: typing.Optional[typing.Union[Callable[[Client], State], State]] = None,
        user_agent: typing.Optional[str] = None,
    ) -> None:
        self.closed: bool = True

        if state:
            if callable(state):
                self._state: State = state(self)
            else:
                self._state = state
        else:
            state = State(populate_managers=populate_managers)

            if parser:
                state.setup(parser=parser(self, state))
            state.setup(
                http=(
                    http(self, state)
                    if http
                    else HTTPClient(
                        token,
                        base=http_base,
                        api_version=api_version,
                        bot=bot,
                        max_retries=max_retries,
                        session=_session_factory,
                        state=state,
                        user_agent=user_agent,
                    )
                ),
            )
            self._state = state
        self._token: str = token
        self.bot: bool = bot

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: typing.Optional[type[BaseException]],
        exc_value: typing.Optional[BaseException],
        traceback: typing.Optional[TracebackType],
        /,
    ) -> None:
        await self.close()

    @property
    def state(self) -> State:
        """:class:`State`: The state."""
        return self._state

    @property
    def http(self) -> HTTPClient:
        """:class:`HTTPClient`: The HTTP client."""
        return self._state.http

    @property
    def me(self) -> typing.Optional[ClientUser]:
        """Optional[:class:`ClientUser`]: The currently logged in user. ``None`` if not logged in."""
        return self._state.me

    @property
    def user(self) -> typing.Optional[ClientUser]:
        """Optional[:class:`ClientUser`]: The currently logged in user. ``None`` if not logged in.

        Alias to :attr:`me`.
        """
        return self._state.me

    @property
    def users(self) -> Collection[str, User]:
        """:class:`Collection`: The cached users."""
        return self._state.users

    @property
    def channels(self) -> Collection[str, Channel]:
        """:class:`Collection`: The cached channels."""
        return self._state.channels

    @property
    def guilds(self) -> Collection[str, Guild]:
        """:class:`Collection`: The cached guilds."""
        return self._state.guilds

    async def login(self, token: UndefinedOr[str] = UNDEFINED, /, *, bot: UndefinedOr[bool] = UNDEFINED) -> ClientUser:
        """|coro|

        Fetches the current user, and stores it as :attr:`me`.

        Parameters
        ----------
        token: UndefinedOr[:class:`str`]
            The token to use. Defaults to one passed in constructor.
        bot: UndefinedOr[:class:`bool`]
            Whether the token belongs to bot account.

        Raises
        ------
        :class:`Unauthorized`
            The token is invalid.

        Returns
        -------
        :class:`ClientUser`
            The current user.
        """
        if token is not UNDEFINED:
            self._token = token
        if bot is not UNDEFINED:
            self.bot = bot
        if token is not UNDEFINED or bot is not UNDEFINED:
            self.http.with_credentials(self._token, bot=self.bot)

        response = await self.http.get_me()
        me = self._state.parser.parse_client_user(response.unwrap())
        self._state.me = me
        self.closed = False
        _L.info('Logged in as %s (%s)', me.name, me.id)
        return me

    def get_user(self, user_id: str, /) -> typing.Optional[User]:
        """Retrieves a user from cache.

        Parameters
        ----------
        user_id: :class:`str`
            The user ID.

        Returns
        -------
        Optional[:class:`User`]
            The user or ``None`` if not found.
        """
        return self._state.users.get(user_id)

    def get_channel(self, channel_id: str, /) -> typing.Optional[Channel]:
        return self._state.channels.get(channel_id)

    def get_guild(self, guild_id: str, /) -> typing.Optional[Guild]:
        return self._state.guilds.get(guild_id)

    async def fetch_user(self, user: IDOr[User], /) -> User:
        """|coro|

        Retrieves a user from API. This is shortcut to :meth:`HTTPClient.get_user`.

        Raises
        ------
        :class:`NotFound`
            The user does not exist.
        """
        response = await self.http.get_user(resolve_id(user))
        return self._state.parser.parse_user(response.unwrap())

    async def fetch_channel(self, channel: IDOr[Channel], /) -> Channel:
        """|coro|

        Retrieves a channel from API, and stores it in cache.

        Raises
        ------
        :class:`NotFound`
            The channel does not exist.
        :class:`Forbidden`
            You do not have permissions to see the channel.
        """
        response = await self.http.get_channel(resolve_id(channel))
        result = self._state.parser.parse_channel(response.unwrap())
        self._state.channels.set(result.id, result)

        guild_id = getattr(result, 'guild_id', None)
        if guild_id is not None:
            guild = self._state.guilds.get(guild_id)
            if guild is not None:
                guild.channels.cache.set(result.id, result)  # type: ignore
        return result

    async def fetch_guild(self, guild: IDOr[Guild], /, *, with_counts: bool = False) -> Guild:
        """|coro|

        Retrieves a guild from API, and stores it in cache.

        Once stored, the guild managers start fetching its channels and members in background.

        Raises
        ------
        :class:`NotFound`
            The guild does not exist, or you are not in it.
        """
        response = await self.http.get_guild(resolve_id(guild), with_counts=with_counts)
        return self._state.parser.parse_guild(response.unwrap())

    def parse_interaction(self, payload: raw.Interaction, /) -> Interaction:
        """Builds an interaction out of payload received from Discord.

        Parameters
        ----------
        payload: Dict[:class:`str`, Any]
            The interaction payload, as received through webhook or gateway.

        Returns
        -------
        :class:`Interaction`
            The interaction. The subclass depends on interaction type.
        """
        return self._state.parser.parse_interaction(payload)

    async def close(self, *, http: bool = True) -> None:
        """|coro|

        Closes the HTTP session.
        """
        self.closed = True
        if http:
            await self.http.cleanup()

    @staticmethod
    def setup_logging(
        *,
        handler: UndefinedOr[logging.Handler] = UNDEFINED,
        formatter: UndefinedOr[logging.Formatter] = UNDEFINED,
        level: UndefinedOr[int] = UNDEFINED,
        root: bool = True,
    ) -> None:
        """Shortcut to :func:`utils.setup_logging`."""
        utils.setup_logging(handler=handler, formatter=formatter, level=level, root=root)


__all__ = ('Client',)
