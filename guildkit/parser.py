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

from .cache import Collection
from .channel import (
    CategoryChannel,
    DMChannel,
    GuildChannel,
    TextChannel,
    ThreadChannel,
    VoiceChannel,
    Channel,
)
from .enums import ChannelType, InteractionType
from .errors import InvalidData
from .guild import Guild, Member, Role
from .interaction import (
    ApplicationCommandInteraction,
    ComponentInteraction,
    Interaction,
    ModalSubmitInteraction,
)
from .managers import GuildChannelManager, GuildMemberManager
from .message import InteractionResponse, Message
from .user import ClientUser, User
from .utils import parse_time

if typing.TYPE_CHECKING:
    from collections.abc import Callable

    from . import raw
    from .state import State


class Parser:
    """An factory that produces wrapper objects from raw data.

    Users and guilds are folded into the client-wide caches of the state:
    parsing a user that is already cached updates the cached object in place and
    returns it, so every holder sees the same instance.

    Attributes
    ----------
    state: :class:`.State`
        The state the parser is attached to.
    """

    __slots__ = (
        'state',
        '_channel_parsers',
        '_interaction_parsers',
    )

    def __init__(self, *, state: State) -> None:
        self.state: State = state
        self._channel_parsers: dict[int, Callable[[typing.Any], Channel]] = {
            ChannelType.text: self.parse_text_channel,
            ChannelType.news: self.parse_text_channel,
            ChannelType.forum: self.parse_text_channel,
            ChannelType.media: self.parse_text_channel,
            ChannelType.private: self.parse_dm_channel,
            ChannelType.group: self.parse_dm_channel,
            ChannelType.voice: self.parse_voice_channel,
            ChannelType.stage_voice: self.parse_voice_channel,
            ChannelType.category: self.parse_category_channel,
            ChannelType.news_thread: self.parse_thread_channel,
            ChannelType.public_thread: self.parse_thread_channel,
            ChannelType.private_thread: self.parse_thread_channel,
        }
        self._interaction_parsers: dict[int, Callable[[typing.Any], Interaction]] = {
            InteractionType.application_command: self.parse_application_command_interaction,
            InteractionType.autocomplete: self.parse_application_command_interaction,
            InteractionType.message_component: self.parse_component_interaction,
            InteractionType.modal_submit: self.parse_modal_submit_interaction,
        }

    # Users

    def parse_user(self, payload: raw.User, /) -> User:
        """Parses a user object, reusing cached user if present.

        Parameters
        ----------
        payload: Dict[:class:`str`, Any]
            The user payload to parse.

        Returns
        -------
        :class:`User`
            The parsed user object, stored in :attr:`State.users`.
        """
        users = self.state.users
        user = users.get(payload['id'])
        if user is not None:
            user.locally_update(payload)
            return user

        user = User(
            state=self.state,
            id=payload['id'],
            name=payload['username'],
            discriminator=payload.get('discriminator', '0'),
            global_name=payload.get('global_name'),
            avatar=payload.get('avatar'),
            banner=payload.get('banner'),
            accent_color=payload.get('accent_color'),
            bot=payload.get('bot', False),
            system=payload.get('system', False),
            raw_public_flags=payload.get('public_flags', 0),
        )
        return users.set(user.id, user)

    def parse_client_user(self, payload: raw.ClientUser, /) -> ClientUser:
        me = self.state.me
        if me is not None and me.id == payload['id']:
            me.locally_update(payload)
            return me

        return ClientUser(
            state=self.state,
            id=payload['id'],
            name=payload['username'],
            discriminator=payload.get('discriminator', '0'),
            global_name=payload.get('global_name'),
            avatar=payload.get('avatar'),
            banner=payload.get('banner'),
            accent_color=payload.get('accent_color'),
            bot=payload.get('bot', False),
            system=payload.get('system', False),
            raw_public_flags=payload.get('public_flags', 0),
            verified=payload.get('verified', False),
            mfa_enabled=payload.get('mfa_enabled', False),
            locale=payload.get('locale'),
        )

    # Guilds

    def parse_role(self, payload: raw.Role, guild_id: str, /) -> Role:
        return Role(
            state=self.state,
            id=payload['id'],
            guild_id=guild_id,
            name=payload['name'],
            color=payload.get('color', 0),
            hoist=bool(payload.get('hoist')),
            icon=payload.get('icon') or None,
            unicode_emoji=payload.get('unicode_emoji'),
            position=payload.get('position', 0),
            raw_permissions=int(payload.get('permissions', 0)),
            managed=bool(payload.get('managed')),
            mentionable=bool(payload.get('mentionable')),
            tags=dict(payload.get('tags') or {}),
            raw_flags=payload.get('flags', 0),
        )

    def parse_member(self, payload: raw.Member, guild_id: str, /, *, user: typing.Optional[User] = None) -> Member:
        """Parses a member object.

        Parameters
        ----------
        payload: Dict[:class:`str`, Any]
            The member payload to parse.
        guild_id: :class:`str`
            The guild's ID the member is in.
        user: Optional[:class:`User`]
            The user, if payload does not carry it.

        Raises
        ------
        :class:`InvalidData`
            The payload has no user, and no user was passed.

        Returns
        -------
        :class:`Member`
            The parsed member object.
        """
        if 'user' in payload:
            user = self.parse_user(payload['user'])
        elif user is None:
            raise InvalidData('Member payload has no user')

        member = Member(
            state=self.state,
            id=user.id,
            guild_id=guild_id,
            user=user,
            role_ids=payload.get('roles', ()),
            joined_at=parse_time(payload.get('joined_at')),
            mute=payload.get('mute', False),
            deaf=payload.get('deaf', False),
            raw_flags=payload.get('flags', 0),
        )
        member._patch(payload)
        return member

    def parse_guild(self, payload: raw.Guild, /) -> Guild:
        """Parses a guild object and stores it in :attr:`State.guilds`.

        A guild that is already cached is updated in place and returned.

        Channels and members carried by payload are stored in guild managers.
        """
        guild_id = payload['id']
        guild = self.state.guilds.get(guild_id)
        if guild is not None:
            guild.locally_update(payload)
            for data in payload.get('roles', ()):
                role = guild.roles.get(data['id'])
                if role is None:
                    guild.roles.set(data['id'], self.parse_role(data, guild_id))
                else:
                    role.locally_update(data)
            return guild

        roles: Collection[str, Role] = Collection()
        for data in payload.get('roles', ()):
            role = self.parse_role(data, guild_id)
            roles.set(role.id, role)

        guild = Guild(
            state=self.state,
            id=guild_id,
            name=payload['name'],
            icon=payload.get('icon'),
            description=payload.get('description'),
            owner_id=payload['owner_id'],
            features=payload.get('features', []),
            preferred_locale=payload.get('preferred_locale'),
            roles=roles,
            channels=GuildChannelManager(self.state, guild_id, populate=False),
            members=GuildMemberManager(self.state, guild_id, populate=False),
        )
        self.state.guilds.set(guild.id, guild)

        for data in payload.get('channels', ()):
            data.setdefault('guild_id', guild_id)
            guild.channels._store(self.parse_channel(data))  # type: ignore
        for data in payload.get('members', ()):
            guild.members._store(self.parse_member(data, guild_id))

        if self.state.populate_managers:
            guild.channels._schedule()
            guild.members._schedule()

        return guild

    # Channels

    def parse_channel(self, payload: raw.Channel, /) -> Channel:
        """Parses a channel object based on its type.

        Unknown guild channel types become :class:`GuildChannel`.
        """
        parser = self._channel_parsers.get(payload['type'])
        if parser is not None:
            return parser(payload)
        if 'guild_id' in payload:
            return self.parse_guild_channel(payload)  # type: ignore
        raise InvalidData(f'Unknown channel type {payload["type"]!r}')

    def _guild_channel_kwargs(self, payload: raw.GuildChannel, /) -> dict[str, typing.Any]:
        return {
            'state': self.state,
            'id': payload['id'],
            'raw_type': payload['type'],
            'guild_id': payload['guild_id'],
            'name': payload.get('name', ''),
            'position': payload.get('position', 0),
            'parent_id': payload.get('parent_id'),
            'nsfw': payload.get('nsfw', False),
        }

    def parse_guild_channel(self, payload: raw.GuildChannel, /) -> GuildChannel:
        return GuildChannel(**self._guild_channel_kwargs(payload))

    def parse_text_channel(self, payload: raw.TextChannel, /) -> TextChannel:
        return TextChannel(
            **self._guild_channel_kwargs(payload),
            topic=payload.get('topic'),
            last_message_id=payload.get('last_message_id'),
            rate_limit_per_user=payload.get('rate_limit_per_user', 0),
        )

    def parse_voice_channel(self, payload: raw.VoiceChannel, /) -> VoiceChannel:
        return VoiceChannel(
            **self._guild_channel_kwargs(payload),
            bitrate=payload.get('bitrate', 64000),
            user_limit=payload.get('user_limit', 0),
            rtc_region=payload.get('rtc_region'),
        )

    def parse_category_channel(self, payload: raw.GuildChannel, /) -> CategoryChannel:
        return CategoryChannel(**self._guild_channel_kwargs(payload))

    def parse_thread_channel(self, payload: raw.ThreadChannel, /) -> ThreadChannel:
        metadata = payload.get('thread_metadata') or {}
        return ThreadChannel(
            **self._guild_channel_kwargs(payload),
            owner_id=payload.get('owner_id'),
            message_count=payload.get('message_count', 0),
            member_count=payload.get('member_count', 0),
            archived=metadata.get('archived', False),
            locked=metadata.get('locked', False),
        )

    def parse_dm_channel(self, payload: raw.DMChannel, /) -> DMChannel:
        return DMChannel(
            state=self.state,
            id=payload['id'],
            raw_type=payload['type'],
            recipient_ids=[self.parse_user(u).id for u in payload.get('recipients', ())],
            last_message_id=payload.get('last_message_id'),
        )

    # Messages

    def _message_kwargs(self, payload: raw.Message, /) -> dict[str, typing.Any]:
        reference = payload.get('message_reference') or {}
        return {
            'state': self.state,
            'id': payload['id'],
            'channel_id': payload['channel_id'],
            'guild_id': payload.get('guild_id'),
            'author': self.parse_user(payload['author']),
            'content': payload.get('content', ''),
            'tts': payload.get('tts', False),
            'embeds': payload.get('embeds', []),
            'attachments': payload.get('attachments', []),
            'components': payload.get('components', []),
            'mention_ids': [self.parse_user(u).id for u in payload.get('mentions', ())],
            'role_mention_ids': payload.get('mention_roles', ()),
            'mention_everyone': payload.get('mention_everyone', False),
            'raw_flags': payload.get('flags', 0),
            'timestamp': parse_time(payload.get('timestamp')),
            'edited_at': parse_time(payload.get('edited_timestamp')),
            'reference_id': reference.get('message_id'),
            'webhook_id': payload.get('webhook_id'),
            'application_id': payload.get('application_id'),
        }

    def parse_message(self, payload: raw.Message, /) -> Message:
        return Message(**self._message_kwargs(payload))

    def parse_interaction_response(self, payload: raw.Message, interaction: Interaction, /) -> InteractionResponse:
        """Parses a message sent in response to interaction.

        Parameters
        ----------
        payload: Dict[:class:`str`, Any]
            The message payload to parse.
        interaction: :class:`Interaction`
            The interaction the message responds to.
        """
        return InteractionResponse(
            **self._message_kwargs(payload),
            token=interaction.token,
            interaction_id=interaction.id,
            interaction_application_id=interaction.application_id,
        )

    # Interactions

    def _interaction_kwargs(self, payload: raw.Interaction, /) -> dict[str, typing.Any]:
        guild_id = payload.get('guild_id')
        member: typing.Optional[Member] = None

        if 'member' in payload and guild_id is not None:
            member = self.parse_member(payload['member'], guild_id)
            user = member.user
            guild = self.state.guilds.get(guild_id)
            if guild is not None:
                guild.members._store(member)
        elif 'user' in payload:
            user = self.parse_user(payload['user'])
        else:
            raise InvalidData('Interaction payload has neither member nor user')

        message = payload.get('message')

        return {
            'state': self.state,
            'id': payload['id'],
            'raw_type': payload['type'],
            'application_id': payload['application_id'],
            'token': payload['token'],
            'guild_id': guild_id,
            'channel_id': payload.get('channel_id'),
            'member': member,
            'user': user,
            'raw_app_permissions': int(payload.get('app_permissions', 0)),
            'locale': payload.get('locale'),
            'guild_locale': payload.get('guild_locale'),
            'data': payload.get('data', {}),
            'message': None if message is None else self.parse_message(message),
        }

    def parse_interaction(self, payload: raw.Interaction, /) -> Interaction:
        """Parses an interaction object based on its type.

        Parameters
        ----------
        payload: Dict[:class:`str`, Any]
            The interaction payload to parse.

        Returns
        -------
        :class:`Interaction`
            The parsed interaction object. Its member and user are folded into caches.
        """
        parser = self._interaction_parsers.get(payload['type'])
        if parser is not None:
            return parser(payload)
        return Interaction(**self._interaction_kwargs(payload))

    def parse_application_command_interaction(self, payload: raw.Interaction, /) -> ApplicationCommandInteraction:
        return ApplicationCommandInteraction(**self._interaction_kwargs(payload))

    def parse_component_interaction(self, payload: raw.Interaction, /) -> ComponentInteraction:
        return ComponentInteraction(**self._interaction_kwargs(payload))

    def parse_modal_submit_interaction(self, payload: raw.Interaction, /) -> ModalSubmitInteraction:
        return ModalSubmitInteraction(**self._interaction_kwargs(payload))


__all__ = ('Parser',)
