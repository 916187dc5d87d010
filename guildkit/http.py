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

import asyncio
import logging
import typing
from urllib.parse import quote as urlquote

import aiohttp
from attrs import define, field
from multidict import CIMultiDict

from . import routes, utils
from .core import (
    UNDEFINED,
    UndefinedOr,
    IDOr,
    resolve_id,
    __version__ as version,
)
from .errors import (
    HTTPException,
    Unauthorized,
    Forbidden,
    NotFound,
    Ratelimited,
    InternalServerError,
    BadGateway,
)

if typing.TYPE_CHECKING:
    from collections.abc import Sequence

    from .base import Base
    from .payloads import File
    from .state import State

DEFAULT_HTTP_USER_AGENT = f'guildkit (https://github.com/guildkit/guildkit, {version})'

_L = logging.getLogger(__name__)

_STATUS_TO_ERRORS: dict[int, type[HTTPException]] = {
    401: Unauthorized,
    403: Forbidden,
    404: NotFound,
    429: Ratelimited,
    500: InternalServerError,
    502: BadGateway,
}


@define(slots=True)
class Response:
    """Represents an outcome of API request: either data, or an error.

    Write operations hand this back instead of raising, so callers can
    inspect failures without wrapping every call in ``try``.
    """

    data: typing.Any = field(default=None, repr=True, kw_only=True)
    """Any: The parsed JSON body. ``None`` if request failed or nothing was returned."""

    error: typing.Optional[HTTPException] = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`HTTPException`]: The error, if request failed."""

    @property
    def ok(self) -> bool:
        """:class:`bool`: Whether the request succeeded."""
        return self.error is None

    def unwrap(self) -> typing.Any:
        """Returns the data, or raises the error.

        Raises
        ------
        :class:`HTTPException`
            The request failed.
        """
        if self.error is not None:
            raise self.error
        return self.data


class HTTPClient:
    """Represents an HTTP client sending HTTP requests to the API.

    Attributes
    ----------
    bot: :class:`bool`
        Whether the token belongs to bot account.
    max_retries: :class:`int`
        How many times to retry requests that received 429 or 502 HTTP status code, or had connection reset.
    state: :class:`State`
        The state.
    token: :class:`str`
        The token in use. May be empty if not started.
    user_agent: :class:`str`
        The HTTP user agent used when making requests.
    """

    __slots__ = (
        '_base',
        '_session',
        'bot',
        'max_retries',
        'state',
        'token',
        'user_agent',
    )

    def __init__(
        self,
        token: typing.Optional[str] = None,
        *,
        base: typing.Optional[str] = None,
        api_version: int = 10,
        bot: bool = True,
        max_retries: typing.Optional[int] = None,
        state: State,
        session: typing.Union[utils.MaybeAwaitableFunc[[HTTPClient], aiohttp.ClientSession], aiohttp.ClientSession],
        user_agent: typing.Optional[str] = None,
    ) -> None:
        if base is None:
            base = f'https://discord.com/api/v{api_version}'
        self._base: str = base.rstrip('/')
        self._session: typing.Union[
            utils.MaybeAwaitableFunc[[HTTPClient], aiohttp.ClientSession], aiohttp.ClientSession
        ] = session
        self.bot: bool = bot
        self.max_retries: int = max_retries or 3
        self.state: State = state
        self.token: str = token or ''
        self.user_agent: str = user_agent or DEFAULT_HTTP_USER_AGENT

    @property
    def base(self) -> str:
        """:class:`str`: The base URL used for API requests."""
        return self._base

    def url_for(self, route: routes.CompiledRoute, /) -> str:
        """Returns a URL for route.

        Parameters
        ----------
        route: :class:`~routes.CompiledRoute`
            The route.

        Returns
        -------
        :class:`str`
            The URL for the route.
        """
        return self._base + route.build()

    def with_credentials(self, token: str, *, bot: bool = True) -> None:
        """Modifies HTTP client credentials.

        Parameters
        ----------
        token: :class:`str`
            The authentication token.
        bot: :class:`bool`
            Whether the token belongs to bot account or not. Defaults to ``True``.
        """
        self.token = token
        self.bot = bot

    def add_headers(
        self,
        headers: CIMultiDict[typing.Any],
        route: routes.CompiledRoute,
        /,
        *,
        accept_json: bool = True,
        authenticated: bool = True,
        json_body: bool = False,
        reason: typing.Optional[str] = None,
        token: UndefinedOr[typing.Optional[str]] = UNDEFINED,
        user_agent: UndefinedOr[typing.Optional[str]] = UNDEFINED,
    ) -> None:
        if accept_json:
            headers['Accept'] = 'application/json'

        if json_body:
            headers['Content-Type'] = 'application/json'

        if authenticated:
            if token is UNDEFINED:
                token = self.token
            if token:
                headers['Authorization'] = f'Bot {token}' if self.bot else token

        if user_agent is UNDEFINED:
            user_agent = self.user_agent

        if user_agent is not None:
            headers['User-Agent'] = user_agent

        if reason:
            headers['X-Audit-Log-Reason'] = urlquote(reason, safe='/ ')

    async def _get_session(self) -> aiohttp.ClientSession:
        session = self._session
        if callable(session):
            session = await utils.maybe_coroutine(session, self)
            # detect recursion
            if callable(session):
                raise TypeError(f'Expected aiohttp.ClientSession, not {type(session)!r}')
            # Do not call factory on future requests
            self._session = session
        return session

    async def _read_file(self, session: aiohttp.ClientSession, file: File, /) -> bytes:
        url = file.url
        if isinstance(url, (bytes, bytearray, memoryview)):
            return bytes(url)
        if isinstance(url, str):
            if url.startswith(('http://', 'https://')):
                async with session.get(url) as response:
                    return await response.read()
            with open(url, 'rb') as fp:
                return fp.read()
        return url.read()

    def _build_form(self, json: UndefinedOr[typing.Any], files: list[tuple[str, bytes]], /) -> aiohttp.FormData:
        form = aiohttp.FormData(quote_fields=False)
        form.add_field(
            'payload_json',
            utils.to_json({} if json is UNDEFINED else json),
            content_type='application/json',
        )
        for i, (name, data) in enumerate(files):
            form.add_field(f'files[{i}]', data, filename=name, content_type='application/octet-stream')
        return form

    async def send_request(
        self,
        session: aiohttp.ClientSession,
        /,
        *,
        method: str,
        url: str,
        headers: CIMultiDict[typing.Any],
        **kwargs,
    ) -> aiohttp.ClientResponse:
        return await session.request(
            method,
            url,
            headers=headers,
            **kwargs,
        )

    async def raw_request(
        self,
        route: routes.CompiledRoute,
        *,
        accept_json: bool = True,
        authenticated: UndefinedOr[bool] = UNDEFINED,
        files: typing.Optional[Sequence[File]] = None,
        json: UndefinedOr[typing.Any] = UNDEFINED,
        reason: typing.Optional[str] = None,
        token: UndefinedOr[typing.Optional[str]] = UNDEFINED,
        user_agent: UndefinedOr[str] = UNDEFINED,
        **kwargs,
    ) -> aiohttp.ClientResponse:
        """|coro|

        Perform a HTTP request, with retries and errors handling.

        Parameters
        ----------
        route: :class:`~routes.CompiledRoute`
            The route.
        accept_json: :class:`bool`
            Whether to explicitly receive JSON or not. Defaults to ``True``.
        authenticated: UndefinedOr[:class:`bool`]
            Whether to send the ``Authorization`` header. Defaults to what route says.
        files: Optional[Sequence[:class:`~guildkit.File`]]
            The files to upload. When given, the body is sent as ``multipart/form-data``
            with JSON placed in ``payload_json`` part.
        json: UndefinedOr[typing.Any]
            The JSON payload to pass in.
        reason: Optional[:class:`str`]
            The reason to show up in guild audit log.
        token: UndefinedOr[Optional[:class:`str`]]
            The token to use when requesting the route.
        user_agent: UndefinedOr[:class:`str`]
            The user agent to use for HTTP request. Defaults to :attr:`.user_agent`.

        Raises
        ------
        :class:`HTTPException`
            Something went wrong during request.

        Returns
        -------
        :class:`aiohttp.ClientResponse`
            The aiohttp response.
        """
        headers: CIMultiDict[str]

        try:
            headers = CIMultiDict(kwargs.pop('headers'))
        except KeyError:
            headers = CIMultiDict()

        if authenticated is UNDEFINED:
            authenticated = route.route.authenticated

        self.add_headers(
            headers,
            route,
            accept_json=accept_json,
            authenticated=authenticated,
            json_body=json is not UNDEFINED and not files,
            reason=reason,
            token=token,
            user_agent=user_agent,
        )

        method = route.route.method
        path = route.build()
        url = self._base + path

        session = await self._get_session()

        resolved_files: list[tuple[str, bytes]] = []
        if files:
            for file in files:
                resolved_files.append((file.name, await self._read_file(session, file)))
        elif json is not UNDEFINED:
            kwargs['data'] = utils.to_json(json)

        retries = 0

        while True:
            if resolved_files:
                # form data can be consumed only once
                kwargs['data'] = self._build_form(json, resolved_files)

            _L.debug('Sending request to %s %s with %s', method, path, utils.to_json(json) if json is not UNDEFINED else None)

            try:
                response = await self.send_request(
                    session,
                    method=method,
                    url=url,
                    headers=headers,
                    **kwargs,
                )
            except OSError as exc:
                if isinstance(exc, ConnectionResetError) or exc.errno in (54, 10054):
                    retries += 1
                    if retries >= self.max_retries:
                        raise
                    _L.debug('%s %s: connection reset by peer, retrying', method, path)
                    await asyncio.sleep(1.5)
                    continue
                raise

            if response.status >= 400:
                _L.debug('%s %s has returned %s', method, path, response.status)

                retries += 1

                if response.status == 502:
                    if retries >= self.max_retries:
                        data = await utils._json_or_text(response)
                        raise BadGateway(response, data)
                    await asyncio.sleep(1 + retries * 2)
                    continue

                elif response.status == 429:
                    if retries < self.max_retries:
                        data = await utils._json_or_text(response)

                        if isinstance(data, dict):
                            retry_after: float = data.get('retry_after', 1)
                        else:
                            retry_after = float(response.headers.get('Retry-After', 1))

                        _L.debug(
                            'Ratelimited on %s %s, retrying in %.3f seconds',
                            method,
                            url,
                            retry_after,
                        )
                        await asyncio.sleep(retry_after)
                        continue

                data = await utils._json_or_text(response)
                if response.status >= 500:
                    raise _STATUS_TO_ERRORS.get(response.status, InternalServerError)(response, data)
                raise _STATUS_TO_ERRORS.get(response.status, HTTPException)(response, data)
            return response

    async def request(
        self,
        route: routes.CompiledRoute,
        *,
        accept_json: bool = True,
        authenticated: UndefinedOr[bool] = UNDEFINED,
        files: typing.Optional[Sequence[File]] = None,
        json: UndefinedOr[typing.Any] = UNDEFINED,
        log: bool = True,
        reason: typing.Optional[str] = None,
        token: UndefinedOr[typing.Optional[str]] = UNDEFINED,
        user_agent: UndefinedOr[str] = UNDEFINED,
        **kwargs,
    ) -> Response:
        """|coro|

        Perform a HTTP request, with retries and errors handling.

        Unlike :meth:`raw_request`, this never raises :class:`HTTPException`; the failure
        is placed in :attr:`Response.error` instead.

        Parameters
        ----------
        route: :class:`~routes.CompiledRoute`
            The route.
        accept_json: :class:`bool`
            Whether to explicitly receive JSON or not. Defaults to ``True``.
        authenticated: UndefinedOr[:class:`bool`]
            Whether to send the ``Authorization`` header. Defaults to what route says.
        files: Optional[Sequence[:class:`~guildkit.File`]]
            The files to upload.
        json: UndefinedOr[typing.Any]
            The JSON payload to pass in.
        log: :class:`bool`
            Whether to log successful response or not. This option is intended to avoid console spam caused
            by routes like ``GET /guilds/{guild_id}/members``. Defaults to ``True``.
        reason: Optional[:class:`str`]
            The reason to show up in guild audit log.
        token: UndefinedOr[Optional[:class:`str`]]
            The token to use when requesting the route.
        user_agent: UndefinedOr[:class:`str`]
            The user agent to use for HTTP request. Defaults to :attr:`.user_agent`.

        Returns
        -------
        :class:`Response`
            The parsed JSON response, or the error.
        """
        try:
            response = await self.raw_request(
                route,
                accept_json=accept_json,
                authenticated=authenticated,
                files=files,
                json=json,
                reason=reason,
                token=token,
                user_agent=user_agent,
                **kwargs,
            )
        except HTTPException as exc:
            _L.debug('%s failed: %s', route.route, exc)
            return Response(error=exc)

        if response.status == 204:
            result = None
        else:
            result = await utils._json_or_text(response)

        method = response.request_info.method
        url = response.request_info.url

        if log:
            _L.debug('%s %s has received %s %s', method, url, response.status, result)
        else:
            _L.debug('%s %s has received %s [too large response]', method, url, response.status)

        response.close()
        return Response(data=result)

    async def cleanup(self) -> None:
        """|coro|

        Closes the aiohttp session.
        """
        if not callable(self._session):
            await self._session.close()

    # Channels

    async def get_channel(self, channel: IDOr[Base], /) -> Response:
        """|coro|

        Retrieves a channel by its ID.
        """
        return await self.request(routes.CHANNELS_CHANNEL_FETCH.compile(channel_id=resolve_id(channel)))

    async def send_message(
        self,
        channel: IDOr[Base],
        payload: dict[str, typing.Any],
        /,
        *,
        files: typing.Optional[Sequence[File]] = None,
    ) -> Response:
        """|coro|

        Sends a message to the given channel.
        """
        return await self.request(
            routes.CHANNELS_MESSAGE_SEND.compile(channel_id=resolve_id(channel)),
            json=payload,
            files=files,
        )

    async def edit_message(
        self,
        channel: IDOr[Base],
        message: IDOr[Base],
        payload: dict[str, typing.Any],
        /,
        *,
        files: typing.Optional[Sequence[File]] = None,
    ) -> Response:
        """|coro|

        Edits a message sent by the current user.
        """
        return await self.request(
            routes.CHANNELS_MESSAGE_EDIT.compile(channel_id=resolve_id(channel), message_id=resolve_id(message)),
            json=payload,
            files=files,
        )

    async def delete_message(
        self, channel: IDOr[Base], message: IDOr[Base], /, *, reason: typing.Optional[str] = None
    ) -> Response:
        """|coro|

        Deletes a message.
        """
        return await self.request(
            routes.CHANNELS_MESSAGE_DELETE.compile(channel_id=resolve_id(channel), message_id=resolve_id(message)),
            reason=reason,
        )

    # Guilds

    async def get_guild(self, guild: IDOr[Base], /, *, with_counts: bool = False) -> Response:
        """|coro|

        Retrieves a guild by its ID.
        """
        params = {'with_counts': 'true'} if with_counts else {}
        return await self.request(routes.GUILDS_GUILD_FETCH.compile(guild_id=resolve_id(guild)), params=params)

    async def get_guild_channels(self, guild: IDOr[Base], /) -> Response:
        return await self.request(routes.GUILDS_CHANNELS_FETCH.compile(guild_id=resolve_id(guild)))

    async def get_guild_members(self, guild: IDOr[Base], /, *, limit: int = 1000) -> Response:
        return await self.request(
            routes.GUILDS_MEMBERS_FETCH.compile(guild_id=resolve_id(guild)),
            log=False,
            params={'limit': limit},
        )

    async def get_guild_member(self, guild: IDOr[Base], user: IDOr[Base], /) -> Response:
        return await self.request(
            routes.GUILDS_MEMBER_FETCH.compile(guild_id=resolve_id(guild), user_id=resolve_id(user))
        )

    async def edit_guild_member(
        self,
        guild: IDOr[Base],
        user: IDOr[Base],
        payload: dict[str, typing.Any],
        /,
        *,
        reason: typing.Optional[str] = None,
    ) -> Response:
        """|coro|

        Modifies attributes of a guild member.
        """
        return await self.request(
            routes.GUILDS_MEMBER_EDIT.compile(guild_id=resolve_id(guild), user_id=resolve_id(user)),
            json=payload,
            reason=reason,
        )

    async def edit_my_guild_member(
        self,
        guild: IDOr[Base],
        payload: dict[str, typing.Any],
        /,
        *,
        reason: typing.Optional[str] = None,
    ) -> Response:
        """|coro|

        Modifies attributes of the current user's member.
        """
        return await self.request(
            routes.GUILDS_MEMBER_EDIT_SELF.compile(guild_id=resolve_id(guild)),
            json=payload,
            reason=reason,
        )

    async def kick_guild_member(
        self, guild: IDOr[Base], user: IDOr[Base], /, *, reason: typing.Optional[str] = None
    ) -> Response:
        return await self.request(
            routes.GUILDS_MEMBER_REMOVE.compile(guild_id=resolve_id(guild), user_id=resolve_id(user)),
            reason=reason,
        )

    async def ban_guild_member(
        self,
        guild: IDOr[Base],
        user: IDOr[Base],
        /,
        *,
        delete_message_seconds: int = 0,
        reason: typing.Optional[str] = None,
    ) -> Response:
        return await self.request(
            routes.GUILDS_BAN_CREATE.compile(guild_id=resolve_id(guild), user_id=resolve_id(user)),
            json={'delete_message_seconds': delete_message_seconds},
            reason=reason,
        )

    async def leave_guild(self, guild: IDOr[Base], /) -> Response:
        """|coro|

        Leaves a guild.
        """
        return await self.request(routes.USERS_GUILD_LEAVE.compile(guild_id=resolve_id(guild)))

    async def add_guild_member_role(
        self,
        guild: IDOr[Base],
        user: IDOr[Base],
        role: IDOr[Base],
        /,
        *,
        reason: typing.Optional[str] = None,
    ) -> Response:
        return await self.request(
            routes.GUILDS_MEMBER_ROLE_ADD.compile(
                guild_id=resolve_id(guild), user_id=resolve_id(user), role_id=resolve_id(role)
            ),
            reason=reason,
        )

    async def remove_guild_member_role(
        self,
        guild: IDOr[Base],
        user: IDOr[Base],
        role: IDOr[Base],
        /,
        *,
        reason: typing.Optional[str] = None,
    ) -> Response:
        return await self.request(
            routes.GUILDS_MEMBER_ROLE_REMOVE.compile(
                guild_id=resolve_id(guild), user_id=resolve_id(user), role_id=resolve_id(role)
            ),
            reason=reason,
        )

    async def get_guild_roles(self, guild: IDOr[Base], /) -> Response:
        return await self.request(routes.GUILDS_ROLES_FETCH.compile(guild_id=resolve_id(guild)))

    async def edit_role(
        self,
        guild: IDOr[Base],
        role: IDOr[Base],
        payload: dict[str, typing.Any],
        /,
        *,
        reason: typing.Optional[str] = None,
    ) -> Response:
        return await self.request(
            routes.GUILDS_ROLE_EDIT.compile(guild_id=resolve_id(guild), role_id=resolve_id(role)),
            json=payload,
            reason=reason,
        )

    async def edit_role_positions(
        self,
        guild: IDOr[Base],
        positions: list[dict[str, typing.Any]],
        /,
        *,
        reason: typing.Optional[str] = None,
    ) -> Response:
        return await self.request(
            routes.GUILDS_ROLE_POSITIONS_EDIT.compile(guild_id=resolve_id(guild)),
            json=positions,
            reason=reason,
        )

    async def delete_role(
        self, guild: IDOr[Base], role: IDOr[Base], /, *, reason: typing.Optional[str] = None
    ) -> Response:
        return await self.request(
            routes.GUILDS_ROLE_DELETE.compile(guild_id=resolve_id(guild), role_id=resolve_id(role)),
            reason=reason,
        )

    # Interactions

    async def create_interaction_response(
        self,
        interaction_id: str,
        interaction_token: str,
        payload: dict[str, typing.Any],
        /,
        *,
        files: typing.Optional[Sequence[File]] = None,
    ) -> Response:
        """|coro|

        Creates a response to an interaction.
        """
        return await self.request(
            routes.INTERACTIONS_CALLBACK.compile(interaction_id=interaction_id, interaction_token=interaction_token),
            json=payload,
            files=files,
        )

    async def get_webhook_message(
        self, application_id: str, interaction_token: str, message_id: str = '@original', /
    ) -> Response:
        return await self.request(
            routes.WEBHOOKS_MESSAGE_FETCH.compile(
                application_id=application_id,
                interaction_token=interaction_token,
                message_id=message_id,
            )
        )

    async def edit_webhook_message(
        self,
        application_id: str,
        interaction_token: str,
        message_id: str,
        payload: dict[str, typing.Any],
        /,
        *,
        files: typing.Optional[Sequence[File]] = None,
    ) -> Response:
        return await self.request(
            routes.WEBHOOKS_MESSAGE_EDIT.compile(
                application_id=application_id,
                interaction_token=interaction_token,
                message_id=message_id,
            ),
            json=payload,
            files=files,
        )

    async def delete_webhook_message(
        self, application_id: str, interaction_token: str, message_id: str = '@original', /
    ) -> Response:
        return await self.request(
            routes.WEBHOOKS_MESSAGE_DELETE.compile(
                application_id=application_id,
                interaction_token=interaction_token,
                message_id=message_id,
            )
        )

    async def execute_webhook(
        self,
        application_id: str,
        interaction_token: str,
        payload: dict[str, typing.Any],
        /,
        *,
        files: typing.Optional[Sequence[File]] = None,
    ) -> Response:
        """|coro|

        Sends a follow-up message for an interaction.
        """
        return await self.request(
            routes.WEBHOOKS_EXECUTE.compile(application_id=application_id, interaction_token=interaction_token),
            json=payload,
            files=files,
        )

    # Users

    async def get_user(self, user: IDOr[Base], /) -> Response:
        return await self.request(routes.USERS_FETCH.compile(user_id=resolve_id(user)))

    async def get_me(self) -> Response:
        return await self.request(routes.USERS_FETCH_SELF.compile())

    async def edit_my_user(self, payload: dict[str, typing.Any], /) -> Response:
        """|coro|

        Edits the current user.
        """
        return await self.request(routes.USERS_EDIT_SELF.compile(), json=payload)


__all__ = (
    'DEFAULT_HTTP_USER_AGENT',
    '_STATUS_TO_ERRORS',
    'Response',
    'HTTPClient',
)
