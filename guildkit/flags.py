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

import inspect
import typing

from .utils import MISSING

if typing.TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from typing_extensions import Self


BF = typing.TypeVar('BF', bound='BaseFlags')


class flag(typing.Generic[BF]):
    __slots__ = (
        '__doc__',
        '_func',
        '_parent',
        'name',
        'value',
        'alias',
    )

    def __init__(self, *, alias: bool = False) -> None:
        self.__doc__: typing.Optional[str] = None
        self._func: Callable[[type[BF]], int] = MISSING
        self._parent: type[BF] = MISSING
        self.name: str = ''
        self.value: int = 0
        self.alias: bool = alias

    def __call__(self, func: Callable[[type[BF]], int], /) -> Self:
        self._func = func
        self.__doc__ = func.__doc__
        self.name = func.__name__
        return self

    @typing.overload
    def __get__(self, instance: None, owner: type[BF], /) -> Self: ...

    @typing.overload
    def __get__(self, instance: BF, owner: type[BF], /) -> bool: ...

    def __get__(self, instance: typing.Optional[BF], owner: type[BF], /) -> typing.Union[bool, Self]:
        if instance is None:
            return self
        return (instance.value & self.value) == self.value

    def __set__(self, instance: BF, value: bool, /) -> None:
        if value:
            instance.value |= self.value
        else:
            instance.value &= ~self.value

    def __or__(self, other: typing.Union[BF, flag[BF], int], /) -> BF:
        return self._parent(self.value) | other

    def __and__(self, other: typing.Union[BF, flag[BF], int], /) -> BF:
        return self._parent(self.value) & other

    def __int__(self) -> int:
        return self.value


class BaseFlags:
    """Base class for flags."""

    if typing.TYPE_CHECKING:
        ALL_VALUE: typing.ClassVar[int]
        VALID_FLAGS: typing.ClassVar[dict[str, int]]

    __slots__ = ('value',)

    def __init_subclass__(cls) -> None:
        valid_flags = {}
        for _, f in inspect.getmembers(cls):
            if isinstance(f, flag):
                f.value = f._func(cls)
                f._parent = cls
                if f.alias:
                    continue
                valid_flags[f.name] = f.value

        all = 0
        for value in valid_flags.values():
            all |= value

        cls.ALL_VALUE = all
        cls.VALID_FLAGS = valid_flags

    def __init__(self, value: int = 0, /, **kwargs: bool) -> None:
        self.value: int = value
        for k, f in kwargs.items():
            if k not in self.VALID_FLAGS:
                raise TypeError(f'Unknown flag {k}')
            setattr(self, k, f)

    @classmethod
    def all(cls) -> Self:
        """Returns instance with all flags."""
        return cls(cls.ALL_VALUE)

    @classmethod
    def none(cls) -> Self:
        """Returns instance with no flags."""
        return cls(0)

    def __hash__(self) -> int:
        return hash(self.value)

    def __iter__(self) -> Iterator[tuple[str, bool]]:
        for name in self.VALID_FLAGS:
            yield (name, getattr(self, name))

    def __repr__(self, /) -> str:
        return f'<{self.__class__.__name__} value={self.value}>'

    def copy(self) -> Self:
        """Copies the flag value."""
        return self.__class__(self.value)

    def _value_of(self, other: typing.Union[Self, flag[Self], int], /) -> int:
        if isinstance(other, int):
            return other
        elif isinstance(other, (flag, self.__class__)):
            return other.value
        else:
            raise TypeError(f'cannot get {other.__class__.__name__} value')

    def __contains__(self, other: typing.Union[Self, flag[Self], int], /) -> bool:
        ov = self._value_of(other)
        return (self.value & ov) == ov

    def __bool__(self) -> bool:
        return self.value != 0

    def __eq__(self, other: object, /) -> bool:
        return self is other or isinstance(other, self.__class__) and self.value == other.value

    def __ne__(self, other: object, /) -> bool:
        return not self.__eq__(other)

    def __int__(self) -> int:
        return self.value

    def __and__(self, other: typing.Union[Self, flag[Self], int], /) -> Self:
        return self.__class__(self.value & self._value_of(other))

    def __or__(self, other: typing.Union[Self, flag[Self], int], /) -> Self:
        return self.__class__(self.value | self._value_of(other))

    def __xor__(self, other: typing.Union[Self, flag[Self], int], /) -> Self:
        return self.__class__(self.value ^ self._value_of(other))

    def __iand__(self, other: typing.Union[Self, flag[Self], int], /) -> Self:
        self.value &= self._value_of(other)
        return self

    def __ior__(self, other: typing.Union[Self, flag[Self], int], /) -> Self:
        self.value |= self._value_of(other)
        return self

    def __ixor__(self, other: typing.Union[Self, flag[Self], int], /) -> Self:
        self.value ^= self._value_of(other)
        return self

    def __invert__(self) -> Self:
        return self.__class__(self.value ^ self.ALL_VALUE)


class Permissions(BaseFlags):
    """Wraps up a permission bitfield.

    The raw value is a bit array field of a 53-bit integer; query
    flags via the properties rather than using this raw value.
    """

    __slots__ = ()

    @flag()
    def create_instant_invite(cls) -> int:
        """:class:`bool`: Whether the user can create instant invites."""
        return 1 << 0

    @flag()
    def kick_members(cls) -> int:
        """:class:`bool`: Whether the user can kick members ranked below them."""
        return 1 << 1

    @flag()
    def ban_members(cls) -> int:
        """:class:`bool`: Whether the user can ban members ranked below them."""
        return 1 << 2

    @flag()
    def administrator(cls) -> int:
        """:class:`bool`: Whether the user bypasses every permission check."""
        return 1 << 3

    @flag()
    def manage_channels(cls) -> int:
        """:class:`bool`: Whether the user can edit, delete, or create channels in the guild."""
        return 1 << 4

    @flag()
    def manage_guild(cls) -> int:
        """:class:`bool`: Whether the user can edit guild properties."""
        return 1 << 5

    @flag()
    def add_reactions(cls) -> int:
        return 1 << 6

    @flag()
    def view_audit_log(cls) -> int:
        return 1 << 7

    @flag()
    def priority_speaker(cls) -> int:
        return 1 << 8

    @flag()
    def stream(cls) -> int:
        return 1 << 9

    @flag()
    def view_channel(cls) -> int:
        """:class:`bool`: Whether the user can view a channel."""
        return 1 << 10

    @flag()
    def send_messages(cls) -> int:
        """:class:`bool`: Whether the user can send messages in a channel."""
        return 1 << 11

    @flag()
    def send_tts_messages(cls) -> int:
        return 1 << 12

    @flag()
    def manage_messages(cls) -> int:
        """:class:`bool`: Whether the user can delete or pin messages of others."""
        return 1 << 13

    @flag()
    def embed_links(cls) -> int:
        return 1 << 14

    @flag()
    def attach_files(cls) -> int:
        return 1 << 15

    @flag()
    def read_message_history(cls) -> int:
        return 1 << 16

    @flag()
    def mention_everyone(cls) -> int:
        """:class:`bool`: Whether the user can use ``@everyone``, ``@here`` and mention every role."""
        return 1 << 17

    @flag()
    def use_external_emojis(cls) -> int:
        return 1 << 18

    @flag()
    def view_guild_insights(cls) -> int:
        return 1 << 19

    @flag()
    def connect(cls) -> int:
        return 1 << 20

    @flag()
    def speak(cls) -> int:
        return 1 << 21

    @flag()
    def mute_members(cls) -> int:
        return 1 << 22

    @flag()
    def deafen_members(cls) -> int:
        return 1 << 23

    @flag()
    def move_members(cls) -> int:
        return 1 << 24

    @flag()
    def use_voice_activation(cls) -> int:
        return 1 << 25

    @flag()
    def change_nickname(cls) -> int:
        """:class:`bool`: Whether the user can change own nick."""
        return 1 << 26

    @flag()
    def manage_nicknames(cls) -> int:
        """:class:`bool`: Whether the user can change nicks of members ranked below them."""
        return 1 << 27

    @flag()
    def manage_roles(cls) -> int:
        """:class:`bool`: Whether the user can manage roles ranked below their highest role."""
        return 1 << 28

    @flag()
    def manage_webhooks(cls) -> int:
        return 1 << 29

    @flag()
    def manage_expressions(cls) -> int:
        return 1 << 30

    @flag()
    def use_application_commands(cls) -> int:
        return 1 << 31

    @flag()
    def request_to_speak(cls) -> int:
        return 1 << 32

    @flag()
    def manage_events(cls) -> int:
        return 1 << 33

    @flag()
    def manage_threads(cls) -> int:
        return 1 << 34

    @flag()
    def create_public_threads(cls) -> int:
        return 1 << 35

    @flag()
    def create_private_threads(cls) -> int:
        return 1 << 36

    @flag()
    def use_external_stickers(cls) -> int:
        return 1 << 37

    @flag()
    def send_messages_in_threads(cls) -> int:
        return 1 << 38

    @flag()
    def use_embedded_activities(cls) -> int:
        return 1 << 39

    @flag()
    def moderate_members(cls) -> int:
        """:class:`bool`: Whether the user can time out members ranked below them."""
        return 1 << 40

    @flag()
    def use_soundboard(cls) -> int:
        return 1 << 42

    @flag()
    def send_voice_messages(cls) -> int:
        return 1 << 46

    @flag()
    def send_polls(cls) -> int:
        return 1 << 49


@typing.final
class MessageFlags(BaseFlags):
    """Wraps up a message flag value."""

    __slots__ = ()

    @flag()
    def crossposted(cls) -> int:
        return 1 << 0

    @flag()
    def is_crosspost(cls) -> int:
        return 1 << 1

    @flag()
    def suppress_embeds(cls) -> int:
        """:class:`bool`: Whether embeds are not included when serializing the message."""
        return 1 << 2

    @flag()
    def source_message_deleted(cls) -> int:
        return 1 << 3

    @flag()
    def urgent(cls) -> int:
        return 1 << 4

    @flag()
    def has_thread(cls) -> int:
        return 1 << 5

    @flag()
    def ephemeral(cls) -> int:
        """:class:`bool`: Whether the message is only visible to the user who invoked the interaction."""
        return 1 << 6

    @flag()
    def loading(cls) -> int:
        """:class:`bool`: Whether the message is an interaction response and the bot is "thinking"."""
        return 1 << 7

    @flag()
    def suppress_notifications(cls) -> int:
        """:class:`bool`: Whether the message will not send push/desktop notifications."""
        return 1 << 12

    @flag()
    def voice(cls) -> int:
        return 1 << 13


class UserFlags(BaseFlags):
    """Wraps up public user flags."""

    __slots__ = ()

    @flag()
    def staff(cls) -> int:
        return 1 << 0

    @flag()
    def partner(cls) -> int:
        return 1 << 1

    @flag()
    def hypesquad(cls) -> int:
        return 1 << 2

    @flag()
    def bug_hunter(cls) -> int:
        return 1 << 3

    @flag()
    def hypesquad_bravery(cls) -> int:
        return 1 << 6

    @flag()
    def hypesquad_brilliance(cls) -> int:
        return 1 << 7

    @flag()
    def hypesquad_balance(cls) -> int:
        return 1 << 8

    @flag()
    def early_supporter(cls) -> int:
        return 1 << 9

    @flag()
    def team_user(cls) -> int:
        return 1 << 10

    @flag()
    def bug_hunter_level_2(cls) -> int:
        return 1 << 14

    @flag()
    def verified_bot(cls) -> int:
        return 1 << 16

    @flag()
    def verified_bot_developer(cls) -> int:
        return 1 << 17

    @flag()
    def certified_moderator(cls) -> int:
        return 1 << 18

    @flag()
    def bot_http_interactions(cls) -> int:
        return 1 << 19

    @flag()
    def active_developer(cls) -> int:
        return 1 << 22


class MemberFlags(BaseFlags):
    """Wraps up guild member flags."""

    __slots__ = ()

    @flag()
    def did_rejoin(cls) -> int:
        return 1 << 0

    @flag()
    def completed_onboarding(cls) -> int:
        return 1 << 1

    @flag()
    def bypasses_verification(cls) -> int:
        return 1 << 2

    @flag()
    def started_onboarding(cls) -> int:
        return 1 << 3


__all__ = (
    'flag',
    'BaseFlags',
    'Permissions',
    'MessageFlags',
    'UserFlags',
    'MemberFlags',
)
