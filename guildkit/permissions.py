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

from .errors import NoData
from .flags import Permissions

if typing.TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .guild import Member, Role


def sort_member_roles(
    target_roles: Iterable[str],
    /,
    *,
    safe: bool = True,
    guild_roles: Mapping[str, Role],
) -> list[Role]:
    """Sorts the member roles, highest first.

    Parameters
    ----------
    target_roles: List[:class:`str`]
        The IDs of roles to sort (:attr:`.Member.role_ids`).
    safe: :class:`bool`
        Whether to skip roles missing in cache instead of raising.
    guild_roles: Mapping[:class:`str`, :class:`.Role`]
        The mapping of role IDs to role objects (:attr:`.Guild.roles`).

    Raises
    ------
    NoData
        The role is not found in cache.

    Returns
    -------
    List[:class:`.Role`]
        The sorted result.
    """
    if safe:
        return sorted(
            (guild_roles[tr] for tr in target_roles if tr in guild_roles),
            key=lambda role: role.position,
            reverse=True,
        )
    try:
        return sorted(
            (guild_roles[tr] for tr in target_roles),
            key=lambda role: role.position,
            reverse=True,
        )
    except KeyError as ke:
        raise NoData(ke.args[0], 'role')


def combined_permissions(roles: Iterable[Role], /) -> Permissions:
    """Combines permissions of given roles.

    Parameters
    ----------
    roles: Iterable[:class:`.Role`]
        The roles.

    Returns
    -------
    :class:`Permissions`
        The bitwise OR of every role permissions.
    """
    result = Permissions.none()
    for role in roles:
        result |= role.permissions
    return result


def highest_position(roles: Iterable[Role], /) -> int:
    """:class:`int`: The highest role position, or ``0`` if there are no roles."""
    return max((role.position for role in roles), default=0)


def can_moderate(target: Member, actor: Member, /, *, owner_id: typing.Optional[str], permission: Permissions) -> bool:
    """Checks whether ``actor`` can take a moderation action against ``target``.

    This holds when all of the following hold:

    - actor roles grant ``permission``, or ``administrator``;
    - target is not the actor;
    - target does not own the guild;
    - target highest role is not above actor highest role. Equal positions
      are allowed.

    Parameters
    ----------
    target: :class:`.Member`
        The member being moderated.
    actor: :class:`.Member`
        The member performing the action, usually :attr:`.Guild.me`.
    owner_id: Optional[:class:`str`]
        The guild owner's ID.
    permission: :class:`Permissions`
        The permission required, for example ``Permissions(kick_members=True)``.

    Returns
    -------
    :class:`bool`
        Whether the action is allowed.
    """
    actor_roles = actor.roles.cache.to_list()
    target_roles = target.roles.cache.to_list()

    granted = combined_permissions(actor_roles)
    if permission not in granted and not granted.administrator:
        return False

    if target.id == actor.id:
        return False

    if target.id == owner_id:
        return False

    return highest_position(target_roles) <= highest_position(actor_roles)


__all__ = (
    'sort_member_roles',
    'combined_permissions',
    'highest_position',
    'can_moderate',
)
