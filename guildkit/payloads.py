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

from collections.abc import Mapping
from copy import deepcopy
from datetime import datetime, timedelta
import logging
import typing

from .core import UNDEFINED, UndefinedOr, resolve_id
from .enums import ComponentType, TextInputStyle
from .flags import MessageFlags
from .utils import utcnow

if typing.TYPE_CHECKING:
    from collections.abc import Sequence

    from . import raw

_L = logging.getLogger(__name__)

MENTION_TYPES: typing.Final[tuple[str, ...]] = ('users', 'roles', 'everyone')
"""The allowed mention parse types, in the order they are sent."""

FileSource = typing.Union[str, bytes, bytearray, typing.IO[bytes]]


class PayloadWarning:
    """Represents an input that was skipped while building a payload.

    Only collected when builder runs in strict mode.

    Attributes
    ----------
    kind: :class:`str`
        What was skipped. Either ``'file'`` or ``'mention'``.
    detail: :class:`str`
        The human readable explanation.
    index: Optional[:class:`int`]
        The position of skipped item in the input list, if any.
    """

    __slots__ = ('kind', 'detail', 'index')

    def __init__(self, kind: str, detail: str, index: typing.Optional[int] = None) -> None:
        self.kind: str = kind
        self.detail: str = detail
        self.index: typing.Optional[int] = index

    def __repr__(self) -> str:
        return f'<PayloadWarning kind={self.kind!r} detail={self.detail!r} index={self.index!r}>'

    def __eq__(self, other: object, /) -> bool:
        return (
            isinstance(other, PayloadWarning)
            and self.kind == other.kind
            and self.detail == other.detail
            and self.index == other.index
        )


class File:
    """Represents a file to upload.

    Attributes
    ----------
    name: :class:`str`
        The file name.
    url: Union[:class:`str`, :class:`bytes`, :class:`io.BufferedIOBase`]
        The file contents. Strings starting with ``http://`` or ``https://`` are downloaded,
        other strings are treated as local paths.
    description: Optional[:class:`str`]
        The file description (alt text).
    """

    __slots__ = ('name', 'url', 'description')

    def __init__(self, name: str, url: FileSource, *, description: typing.Optional[str] = None) -> None:
        self.name: str = name
        self.url: FileSource = url
        self.description: typing.Optional[str] = description

    def __repr__(self) -> str:
        return f'<File name={self.name!r}>'

    def __eq__(self, other: object, /) -> bool:
        return (
            isinstance(other, File)
            and self.name == other.name
            and self.url == other.url
            and self.description == other.description
        )


class Mentions:
    """Represents which mentions should notify.

    Attributes
    ----------
    parse: Optional[List[:class:`str`]]
        The mention types to parse from content. Any of ``users``, ``roles`` and ``everyone``, case insensitive.
    users: Optional[List[:class:`str`]]
        The user IDs allowed to be mentioned.
    roles: Optional[List[:class:`str`]]
        The role IDs allowed to be mentioned.
    replied_user: Optional[:class:`bool`]
        Whether to mention author of the replied message.
    """

    __slots__ = ('parse', 'users', 'roles', 'replied_user')

    def __init__(
        self,
        *,
        parse: typing.Optional[Sequence[str]] = None,
        users: typing.Optional[Sequence[typing.Any]] = None,
        roles: typing.Optional[Sequence[typing.Any]] = None,
        replied_user: typing.Optional[bool] = None,
    ) -> None:
        self.parse: typing.Optional[list[str]] = None if parse is None else list(parse)
        self.users: typing.Optional[list[str]] = None if users is None else [resolve_id(u) for u in users]
        self.roles: typing.Optional[list[str]] = None if roles is None else [resolve_id(r) for r in roles]
        self.replied_user: typing.Optional[bool] = replied_user

    @classmethod
    def none(cls) -> Mentions:
        """:class:`Mentions`: Mentions that do not notify anyone."""
        return cls(parse=[])

    @classmethod
    def all(cls) -> Mentions:
        return cls(parse=list(MENTION_TYPES), replied_user=True)

    def build(self) -> dict[str, typing.Any]:
        payload: dict[str, typing.Any] = {}
        if self.parse is not None:
            payload['parse'] = self.parse
        if self.users is not None:
            payload['users'] = self.users
        if self.roles is not None:
            payload['roles'] = self.roles
        if self.replied_user is not None:
            payload['replied_user'] = self.replied_user
        return payload


class Reply:
    """Represents a message reply.

    Attributes
    ----------
    id: :class:`str`
        The ID of the message that being replied to.
    mention: :class:`bool`
        Whether to mention author of referenced message or not.
    error: :class:`bool`
        Whether to fail if referenced message does not exist, instead of sending as normal message.
    """

    __slots__ = ('id', 'mention', 'error')

    def __init__(self, id: typing.Any, mention: bool = False, error: bool = False) -> None:
        self.id: str = resolve_id(id)
        self.mention: bool = mention
        self.error: bool = error

    def build(self) -> dict[str, typing.Any]:
        return {
            'id': self.id,
            'mention': self.mention,
            'error': self.error,
        }


class TextInput:
    """Represents a text input shown in a modal.

    Attributes
    ----------
    custom_id: :class:`str`
        The developer defined ID of input.
    label: :class:`str`
        The label shown above input.
    style: :class:`TextInputStyle`
        The input style.
    """

    __slots__ = ('custom_id', 'label', 'style', 'min_length', 'max_length', 'required', 'value', 'placeholder')

    def __init__(
        self,
        custom_id: str,
        label: str,
        *,
        style: TextInputStyle = TextInputStyle.short,
        min_length: typing.Optional[int] = None,
        max_length: typing.Optional[int] = None,
        required: typing.Optional[bool] = None,
        value: typing.Optional[str] = None,
        placeholder: typing.Optional[str] = None,
    ) -> None:
        self.custom_id: str = custom_id
        self.label: str = label
        self.style: TextInputStyle = style
        self.min_length: typing.Optional[int] = min_length
        self.max_length: typing.Optional[int] = max_length
        self.required: typing.Optional[bool] = required
        self.value: typing.Optional[str] = value
        self.placeholder: typing.Optional[str] = placeholder

    def build(self) -> raw.TextInputComponent:
        payload: raw.TextInputComponent = {
            'type': ComponentType.text_input.value,
            'custom_id': self.custom_id,
            'label': self.label,
            'style': int(self.style),
        }
        if self.min_length is not None:
            payload['min_length'] = self.min_length
        if self.max_length is not None:
            payload['max_length'] = self.max_length
        if self.required is not None:
            payload['required'] = self.required
        if self.value is not None:
            payload['value'] = self.value
        if self.placeholder is not None:
            payload['placeholder'] = self.placeholder
        return payload


def _to_raw(value: typing.Any, /) -> typing.Any:
    """Turns helper objects into plain JSON-compatible values, copying containers."""
    if hasattr(value, 'build') and not isinstance(value, (dict, list, tuple, str)):
        return _to_raw(value.build())
    if hasattr(value, 'to_dict') and not isinstance(value, dict):
        return _to_raw(value.to_dict())
    if isinstance(value, Mapping):
        return {k: _to_raw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_raw(v) for v in value]
    return value


def _resolve_options(data: typing.Any, /) -> dict[str, typing.Any]:
    if isinstance(data, str):
        return {'content': data}
    if data is None:
        return {}
    if isinstance(data, Mapping):
        return dict(data)
    raise TypeError(f'Expected str or mapping, not {type(data).__name__}')


def _resolve_flags(flags: typing.Any, /) -> typing.Optional[int]:
    if flags is None:
        return None
    return int(flags)


class BasePayload:
    """Base class for all payload builders.

    The body is built once on construction and never handed out directly;
    :attr:`payload` and :meth:`build` return fresh copies.
    """

    __slots__ = ('_body', '_files', '_warnings', 'strict')

    def __init__(self, *, strict: bool = False) -> None:
        self._body: dict[str, typing.Any] = {}
        self._files: tuple[File, ...] = ()
        self._warnings: list[PayloadWarning] = []
        self.strict: bool = strict

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} payload={self._body!r} files={len(self._files)}>'

    @property
    def payload(self) -> dict[str, typing.Any]:
        """Dict[:class:`str`, Any]: The request body. Mutating it does not affect the builder."""
        return deepcopy(self._body)

    @property
    def files(self) -> tuple[File, ...]:
        """Tuple[:class:`File`, ...]: The files to upload, in order of ``attachments``."""
        return self._files

    @property
    def warnings(self) -> tuple[PayloadWarning, ...]:
        """Tuple[:class:`PayloadWarning`, ...]: The skipped inputs. Always empty unless built in strict mode."""
        return tuple(self._warnings)

    def build(self) -> dict[str, typing.Any]:
        """Dict[:class:`str`, Any]: Returns a fresh copy of request body, ready for transport."""
        return deepcopy(self._body)

    def _warn(self, kind: str, detail: str, index: typing.Optional[int] = None) -> None:
        if self.strict:
            self._warnings.append(PayloadWarning(kind, detail, index))
        _L.debug('%s skipped %s: %s', self.__class__.__name__, kind, detail)

    def _build_allowed_mentions(self, mentions: typing.Any, /, *, empty_as_null: bool) -> dict[str, typing.Any]:
        if isinstance(mentions, Mentions):
            mentions = mentions.build()
        elif not isinstance(mentions, Mapping):
            raise TypeError(f'Expected Mentions or mapping, not {type(mentions).__name__}')

        result: dict[str, typing.Any] = {}

        if mentions.get('parse') is not None:
            requested = []
            for i, token in enumerate(mentions['parse']):
                if isinstance(token, str) and token.lower() in MENTION_TYPES:
                    requested.append(token.lower())
                else:
                    self._warn('mention', f'unknown mention type {token!r}', i)
            result['parse'] = [m for m in MENTION_TYPES if m in requested]

        for key in ('users', 'roles'):
            if empty_as_null:
                values = mentions.get(key)
                result[key] = [resolve_id(v) for v in values] if values else None
            elif key in mentions:
                values = mentions[key]
                result[key] = None if values is None else [resolve_id(v) for v in values]

        if mentions.get('replied_user') is not None:
            result['replied_user'] = bool(mentions['replied_user'])

        return result

    def _collect_files(self, files: typing.Any, /) -> tuple[list[File], list[dict[str, typing.Any]]]:
        accepted: list[File] = []
        attachments: list[dict[str, typing.Any]] = []

        if files is None:
            return accepted, attachments

        if isinstance(files, (list, tuple)):
            descriptors = files
        else:
            descriptors = [files]

        for i, descriptor in enumerate(descriptors):
            if isinstance(descriptor, File):
                name, url, description = descriptor.name, descriptor.url, descriptor.description
            elif isinstance(descriptor, Mapping):
                name = descriptor.get('name')
                url = descriptor.get('url')
                description = descriptor.get('description')
            else:
                self._warn('file', f'expected File or mapping, not {type(descriptor).__name__}', i)
                continue

            if not name or url is None:
                self._warn('file', 'file descriptor requires both name and url', i)
                continue

            attachments.append(
                {
                    'id': len(accepted),
                    'filename': name,
                    'description': description,
                }
            )
            accepted.append(File(name, url))

        return accepted, attachments


class MessagePayload(BasePayload):
    """Builds a body for creating a message.

    Parameters
    ----------
    data: Union[:class:`str`, Mapping[:class:`str`, Any]]
        The message content, or the options. Recognized options are
        ``content``, ``tts``, ``embeds``, ``mentions``, ``components``,
        ``stickers`` (or ``sticker_ids``), ``flags``, ``files``, ``reply`` and ``nonce``.
    files: Optional[Union[:class:`File`, List[:class:`File`]]]
        The files to upload. Overrides ``files`` option.
    strict: :class:`bool`
        Whether to record skipped inputs in :attr:`warnings`.

    Examples
    --------

    Reply to a message without pinging anyone but replied user: ::

        payload = MessagePayload({
            'content': 'hi',
            'reply': {'id': message.id, 'mention': True},
            'mentions': {'parse': []},
        })
    """

    __slots__ = ()

    def __init__(self, data: typing.Any = None, files: typing.Any = None, *, strict: bool = False) -> None:
        super().__init__(strict=strict)
        options = _resolve_options(data)
        if files is None:
            files = options.get('files')
        self._body = self._build_body(options, files)

    def _build_body(self, options: dict[str, typing.Any], files: typing.Any, /) -> dict[str, typing.Any]:
        sticker_ids = options.get('sticker_ids')
        if sticker_ids is None:
            sticker_ids = options.get('stickers')

        body: dict[str, typing.Any] = {
            'content': options.get('content') or '',
            'tts': bool(options.get('tts', False)),
            'embeds': _to_raw(options['embeds']) if options.get('embeds') is not None else None,
            'allowed_mentions': None,
            'message_reference': None,
            'components': _to_raw(options['components']) if options.get('components') is not None else None,
            'sticker_ids': [resolve_id(s) for s in sticker_ids] if sticker_ids is not None else None,
            'flags': _resolve_flags(options.get('flags')),
            'attachments': None,
        }

        allowed_mentions: dict[str, typing.Any] = {}

        mentions = options.get('mentions')
        if mentions is not None:
            allowed_mentions.update(self._build_allowed_mentions(mentions, empty_as_null=True))

        reply = options.get('reply')
        if reply is not None:
            if isinstance(reply, Mapping):
                reply = Reply(reply['id'], mention=bool(reply.get('mention')), error=reply.get('error') is True)
            elif not isinstance(reply, Reply):
                reply = Reply(reply)

            reference: dict[str, typing.Any] = {'message_id': reply.id}
            if reply.error is True:
                reference['fail_if_not_exists'] = True
            body['message_reference'] = reference

            if reply.mention:
                allowed_mentions['replied_user'] = True

        if allowed_mentions:
            body['allowed_mentions'] = allowed_mentions

        accepted, attachments = self._collect_files(files)
        if accepted and len(accepted) == len(attachments):
            body['attachments'] = attachments
            self._files = tuple(accepted)

        if options.get('nonce') is not None:
            body['nonce'] = options['nonce']

        return body


class InteractionPayload(MessagePayload):
    """Builds a message body for interaction response or follow-up.

    Accepts everything :class:`MessagePayload` does, plus ``ephemeral``.
    ``fetch_reply`` and ``fetch_response`` are accepted and ignored, they are read by
    :meth:`Interaction.reply`.
    """

    __slots__ = ()

    def _build_body(self, options: dict[str, typing.Any], files: typing.Any, /) -> dict[str, typing.Any]:
        body = super()._build_body(options, files)
        if options.get('ephemeral') is True:
            body['flags'] = (body['flags'] or 0) | MessageFlags.ephemeral.value
        return body


class EditMessagePayload(BasePayload):
    """Builds a body for editing a message.

    Only options present in the input make it into the body, so the edit never
    resets fields the caller did not mention. Neither ``content`` nor ``embeds``
    is required.

    Parameters
    ----------
    data: Union[:class:`str`, Mapping[:class:`str`, Any]]
        The new message content, or the options. Recognized options are
        ``content``, ``embeds``, ``mentions``, ``components``, ``flags``, ``files`` and ``attachments``.
    files: Optional[Union[:class:`File`, List[:class:`File`]]]
        The files to upload. Overrides ``files`` option.
    strict: :class:`bool`
        Whether to record skipped inputs in :attr:`warnings`.
    """

    __slots__ = ()

    def __init__(self, data: typing.Any = None, files: typing.Any = None, *, strict: bool = False) -> None:
        super().__init__(strict=strict)
        options = _resolve_options(data)
        if files is None:
            files = options.get('files')

        body: dict[str, typing.Any] = {}

        if 'content' in options:
            body['content'] = options['content']
        if 'embeds' in options:
            body['embeds'] = _to_raw(options['embeds'])
        if options.get('mentions') is not None:
            body['allowed_mentions'] = self._build_allowed_mentions(options['mentions'], empty_as_null=False)
        if 'components' in options:
            body['components'] = _to_raw(options['components'])
        if 'flags' in options:
            body['flags'] = _resolve_flags(options['flags'])

        # existing attachments to keep
        kept = options.get('attachments')
        if kept is not None:
            body['attachments'] = [{'id': resolve_id(a)} if not isinstance(a, Mapping) else dict(a) for a in kept]

        accepted, attachments = self._collect_files(files)
        if accepted and len(accepted) == len(attachments):
            body['attachments'] = body.get('attachments', []) + attachments
            self._files = tuple(accepted)

        self._body = body


class ModalPayload(BasePayload):
    """Builds a modal.

    Bare text inputs are wrapped into their own action rows.

    Parameters
    ----------
    data: Mapping[:class:`str`, Any]
        The modal options: ``custom_id``, ``title`` and ``components``.
    """

    __slots__ = ()

    def __init__(self, data: typing.Any = None, *, strict: bool = False) -> None:
        super().__init__(strict=strict)
        options = _resolve_options(data)

        components = []
        for component in _to_raw(options.get('components') or []):
            if component.get('type') == ComponentType.text_input.value:
                component = {'type': ComponentType.action_row.value, 'components': [component]}
            components.append(component)

        self._body = {
            'custom_id': options.get('custom_id'),
            'title': options.get('title'),
            'components': components,
        }


class MemberEditPayload(BasePayload):
    """Builds a body for editing a guild member.

    The ``reason`` option is kept apart in :attr:`reason`, it is sent in audit log header.

    Parameters
    ----------
    data: Mapping[:class:`str`, Any]
        The options: ``nick``, ``roles``, ``mute``, ``deaf``, ``channel_id``,
        ``communication_disabled_until`` (alias ``timeout``), ``flags`` and ``reason``.
    """

    __slots__ = ('reason',)

    def __init__(self, data: typing.Any = None, *, strict: bool = False) -> None:
        super().__init__(strict=strict)
        options = _resolve_options(data)

        reason = options.get('reason')
        self.reason: typing.Optional[str] = reason.strip() if isinstance(reason, str) and reason.strip() else None

        body: dict[str, typing.Any] = {}
        if 'nick' in options:
            body['nick'] = options['nick']
        if 'roles' in options:
            roles = options['roles']
            body['roles'] = None if roles is None else [resolve_id(r) for r in roles]
        if 'mute' in options:
            body['mute'] = options['mute']
        if 'deaf' in options:
            body['deaf'] = options['deaf']
        if 'channel_id' in options:
            channel = options['channel_id']
            body['channel_id'] = None if channel is None else resolve_id(channel)

        timeout: UndefinedOr[typing.Any] = options.get('communication_disabled_until', options.get('timeout', UNDEFINED))
        if timeout is not UNDEFINED:
            if isinstance(timeout, timedelta):
                timeout = utcnow() + timeout
            if isinstance(timeout, datetime):
                timeout = timeout.isoformat()
            body['communication_disabled_until'] = timeout

        if 'flags' in options:
            body['flags'] = _resolve_flags(options['flags'])

        self._body = body


__all__ = (
    'MENTION_TYPES',
    'PayloadWarning',
    'File',
    'Mentions',
    'Reply',
    'TextInput',
    'BasePayload',
    'MessagePayload',
    'InteractionPayload',
    'EditMessagePayload',
    'ModalPayload',
    'MemberEditPayload',
)
