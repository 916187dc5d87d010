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

import typing
from urllib.parse import quote

HTTPMethod = typing.Literal['GET', 'POST', 'PATCH', 'DELETE', 'PUT']


class CompiledRoute:
    """Represents compiled API route."""

    __slots__ = ('route', 'args')

    def __init__(self, route: Route, /, **args: typing.Any) -> None:
        self.route: Route = route
        self.args: dict[str, typing.Any] = args

    def __repr__(self) -> str:
        return f'<CompiledRoute route={self.route!r} args={self.args!r}>'

    def __str__(self) -> str:
        return f'CompiledRoute({self.route}, **{self.args!r})'

    def build(self) -> str:
        return self.route.path.format_map({k: quote(str(v)) for k, v in self.args.items()})


class Route:
    """Represents API route.

    Attributes
    ----------
    method: :class:`str`
        The HTTP method.
    path: :class:`str`
        The path template, relative to API base.
    authenticated: :class:`bool`
        Whether the route requires the ``Authorization`` header. Interaction
        webhooks and callbacks are authorized by the token in the path instead.
    """

    __slots__ = (
        'method',
        'path',
        'authenticated',
    )

    def __init__(self, method: HTTPMethod, path: str, /, *, authenticated: bool = True) -> None:
        self.method: HTTPMethod = method
        self.path: str = path
        self.authenticated: bool = authenticated

    def __repr__(self) -> str:
        return f'<Route method={self.method!r} path={self.path!r}>'

    def __str__(self) -> str:
        return f'{self.method} {self.path}'

    def compile(self, **args: typing.Any) -> CompiledRoute:
        """Compiles route."""
        return CompiledRoute(self, **args)


GET: typing.Final[HTTPMethod] = 'GET'
POST: typing.Final[HTTPMethod] = 'POST'
PUT: typing.Final[HTTPMethod] = 'PUT'
DELETE: typing.Final[HTTPMethod] = 'DELETE'
PATCH: typing.Final[HTTPMethod] = 'PATCH'


# Channels
CHANNELS_CHANNEL_FETCH: typing.Final[Route] = Route(GET, '/channels/{channel_id}')
CHANNELS_CHANNEL_EDIT: typing.Final[Route] = Route(PATCH, '/channels/{channel_id}')
CHANNELS_CHANNEL_DELETE: typing.Final[Route] = Route(DELETE, '/channels/{channel_id}')
CHANNELS_MESSAGE_SEND: typing.Final[Route] = Route(POST, '/channels/{channel_id}/messages')
CHANNELS_MESSAGE_FETCH: typing.Final[Route] = Route(GET, '/channels/{channel_id}/messages/{message_id}')
CHANNELS_MESSAGE_EDIT: typing.Final[Route] = Route(PATCH, '/channels/{channel_id}/messages/{message_id}')
CHANNELS_MESSAGE_DELETE: typing.Final[Route] = Route(DELETE, '/channels/{channel_id}/messages/{message_id}')

# Guilds
GUILDS_GUILD_FETCH: typing.Final[Route] = Route(GET, '/guilds/{guild_id}')
GUILDS_CHANNELS_FETCH: typing.Final[Route] = Route(GET, '/guilds/{guild_id}/channels')
GUILDS_BAN_CREATE: typing.Final[Route] = Route(PUT, '/guilds/{guild_id}/bans/{user_id}')
GUILDS_MEMBERS_FETCH: typing.Final[Route] = Route(GET, '/guilds/{guild_id}/members')
GUILDS_MEMBER_FETCH: typing.Final[Route] = Route(GET, '/guilds/{guild_id}/members/{user_id}')
GUILDS_MEMBER_EDIT: typing.Final[Route] = Route(PATCH, '/guilds/{guild_id}/members/{user_id}')
GUILDS_MEMBER_EDIT_SELF: typing.Final[Route] = Route(PATCH, '/guilds/{guild_id}/members/@me')
GUILDS_MEMBER_REMOVE: typing.Final[Route] = Route(DELETE, '/guilds/{guild_id}/members/{user_id}')
GUILDS_MEMBER_ROLE_ADD: typing.Final[Route] = Route(PUT, '/guilds/{guild_id}/members/{user_id}/roles/{role_id}')
GUILDS_MEMBER_ROLE_REMOVE: typing.Final[Route] = Route(DELETE, '/guilds/{guild_id}/members/{user_id}/roles/{role_id}')
GUILDS_ROLES_FETCH: typing.Final[Route] = Route(GET, '/guilds/{guild_id}/roles')
GUILDS_ROLE_POSITIONS_EDIT: typing.Final[Route] = Route(PATCH, '/guilds/{guild_id}/roles')
GUILDS_ROLE_EDIT: typing.Final[Route] = Route(PATCH, '/guilds/{guild_id}/roles/{role_id}')
GUILDS_ROLE_DELETE: typing.Final[Route] = Route(DELETE, '/guilds/{guild_id}/roles/{role_id}')

# Interactions
INTERACTIONS_CALLBACK: typing.Final[Route] = Route(
    POST, '/interactions/{interaction_id}/{interaction_token}/callback', authenticated=False
)

# Users
USERS_FETCH: typing.Final[Route] = Route(GET, '/users/{user_id}')
USERS_FETCH_SELF: typing.Final[Route] = Route(GET, '/users/@me')
USERS_EDIT_SELF: typing.Final[Route] = Route(PATCH, '/users/@me')
USERS_GUILD_LEAVE: typing.Final[Route] = Route(DELETE, '/users/@me/guilds/{guild_id}')

# Webhooks
WEBHOOKS_EXECUTE: typing.Final[Route] = Route(POST, '/webhooks/{application_id}/{interaction_token}', authenticated=False)
WEBHOOKS_MESSAGE_FETCH: typing.Final[Route] = Route(
    GET, '/webhooks/{application_id}/{interaction_token}/messages/{message_id}', authenticated=False
)
WEBHOOKS_MESSAGE_EDIT: typing.Final[Route] = Route(
    PATCH, '/webhooks/{application_id}/{interaction_token}/messages/{message_id}', authenticated=False
)
WEBHOOKS_MESSAGE_DELETE: typing.Final[Route] = Route(
    DELETE, '/webhooks/{application_id}/{interaction_token}/messages/{message_id}', authenticated=False
)
