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

if typing.TYPE_CHECKING:
    from aiohttp import ClientResponse as Response


# Thanks Rapptz/discord.py for docs


def _flatten_error_dict(d: dict[str, typing.Any], key: str = '', /) -> dict[str, str]:
    items: list[tuple[str, str]] = []
    for k, v in d.items():
        new_key = key + '.' + k if key else k

        if isinstance(v, dict):
            try:
                _errors: list[dict[str, typing.Any]] = v['_errors']
            except KeyError:
                items.extend(_flatten_error_dict(v, new_key).items())
            else:
                items.append((new_key, ' '.join(x.get('message', '') for x in _errors)))
        else:
            items.append((new_key, v))

    return dict(items)


class GuildkitError(Exception):
    """Base exception class for guildkit

    Ideally speaking, this could be caught to handle any exceptions raised from this library.
    """

    __slots__ = ()


class HTTPException(GuildkitError):
    """Exception that's raised when an HTTP request operation fails.

    Attributes
    ------------
    response: :class:`aiohttp.ClientResponse`
        The response of the failed HTTP request.
    data: Union[Dict[:class:`str`, Any], Any]
        The data of the error. Could be an empty string.
    status: :class:`int`
        The status code of the HTTP request.
    code: :class:`int`
        The API specific error code for the failure. ``0`` if unavailable.
    text: :class:`str`
        The text of the error. Could be an empty string.
    errors: Dict[:class:`str`, :class:`str`]
        The flattened validation errors, keyed by dotted path to the invalid field.
    retry_after: Optional[:class:`float`]
        The duration in seconds to wait until ratelimit expires.
    """

    __slots__ = (
        'response',
        'data',
        'status',
        'code',
        'text',
        'errors',
        'retry_after',
    )

    def __init__(
        self,
        response: Response,
        data: typing.Union[dict[str, typing.Any], str],
        /,
    ) -> None:
        self.response: Response = response
        self.data: typing.Union[dict[str, typing.Any], str] = data
        self.status: int = response.status

        if isinstance(data, dict):
            self.code: int = data.get('code', 0)
            base = data.get('message', '')
            errors = data.get('errors')
            self.errors: dict[str, str] = _flatten_error_dict(errors) if errors else {}
            self.retry_after: typing.Optional[float] = data.get('retry_after')
            if self.errors:
                helpful = '\n'.join('In %s: %s' % t for t in self.errors.items())
                self.text: str = base + '\n' + helpful
            else:
                self.text = base
        else:
            self.code = 0
            self.errors = {}
            self.retry_after = None
            self.text = data or ''

        fmt = '{0} {1} (error code: {2})'
        if len(self.text):
            fmt += ': {3}'

        super().__init__(fmt.format(self.status, getattr(response, 'reason', ''), self.code, self.text))


class Unauthorized(HTTPException):
    __slots__ = ()


class Forbidden(HTTPException):
    __slots__ = ()


class NotFound(HTTPException):
    __slots__ = ()


class Ratelimited(HTTPException):
    __slots__ = ()


class InternalServerError(HTTPException):
    __slots__ = ()


class BadGateway(HTTPException):
    __slots__ = ()


class InvalidData(GuildkitError):
    """Exception that's raised when the library encounters unknown
    or invalid data from the API.
    """

    __slots__ = ('reason',)

    def __init__(self, reason: str, /) -> None:
        self.reason: str = reason
        super().__init__(reason)


class NoData(GuildkitError):
    __slots__ = ('what', 'type')

    def __init__(self, what: str, type: str) -> None:
        self.what = what
        self.type = type
        super().__init__(f'Unable to find {type} {what} in cache')


class InteractionResponded(GuildkitError):
    """Exception that's raised when responding to an interaction that was already responded to."""

    __slots__ = ('interaction_id',)

    def __init__(self, interaction_id: str, /) -> None:
        self.interaction_id: str = interaction_id
        super().__init__(f'Interaction {interaction_id} has already been responded to')


class InteractionNotResponded(GuildkitError):
    """Exception that's raised when editing or following up an interaction that has no response yet."""

    __slots__ = ('interaction_id',)

    def __init__(self, interaction_id: str, /) -> None:
        self.interaction_id: str = interaction_id
        super().__init__(f'Interaction {interaction_id} has not been responded to yet')


__all__ = (
    'GuildkitError',
    'HTTPException',
    'Unauthorized',
    'Forbidden',
    'NotFound',
    'Ratelimited',
    'InternalServerError',
    'BadGateway',
    'InvalidData',
    'NoData',
    'InteractionResponded',
    'InteractionNotResponded',
)
