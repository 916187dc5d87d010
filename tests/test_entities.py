from __future__ import annotations

from datetime import datetime, timezone

import pytest
import guildkit

from factories import (
    FakeHTTP,
    channel_payload,
    error,
    guild_payload,
    make_state,
    member_payload,
    message_payload,
    role_payload,
    snowflake,
    user_payload,
)

GUILD_ID = snowflake(1)
OWNER_ID = snowflake(2)
ME_ID = snowflake(3)
USER_ID = snowflake(4)
CHANNEL_ID = snowflake(20)
ROLE_ID = snowflake(10)


def setup() -> tuple[guildkit.State, FakeHTTP, guildkit.Guild]:
    state, http = make_state()
    state.me = state.parser.parse_client_user(user_payload(ME_ID, 'me', bot=True))
    guild = state.parser.parse_guild(guild_payload(GUILD_ID, OWNER_ID, roles=[role_payload(ROLE_ID, position=1)]))
    return state, http, guild


def test_created_at():
    state, _, guild = setup()
    assert guild.created_at.tzinfo is timezone.utc
    created = guildkit.snowflake_time('175928847299117063')
    assert created.replace(microsecond=0) == datetime(2016, 4, 30, 11, 18, 25, tzinfo=timezone.utc)


def test_parse_channels():
    state, _, guild = setup()
    parser = state.parser

    category = parser.parse_channel(channel_payload(snowflake(21), GUILD_ID, type=4, name='Category'))
    text = parser.parse_channel(channel_payload(CHANNEL_ID, GUILD_ID, parent_id=snowflake(21)))
    thread = parser.parse_channel(channel_payload(snowflake(22), GUILD_ID, type=11, name='thread'))
    unknown = parser.parse_channel(channel_payload(snowflake(23), GUILD_ID, type=99, name='future'))
    dm = parser.parse_channel({'id': snowflake(24), 'type': 1, 'recipients': [user_payload(USER_ID)]})

    assert isinstance(category, guildkit.CategoryChannel)
    assert isinstance(text, guildkit.TextChannel)
    assert isinstance(thread, guildkit.ThreadChannel)
    assert type(unknown) is guildkit.GuildChannel
    assert unknown.type == 99
    assert isinstance(dm, guildkit.DMChannel)
    assert dm.recipient_ids == (USER_ID,)
    assert text.mention == f'<#{CHANNEL_ID}>'

    for channel in (category, text, thread):
        guild.channels._store(channel)  # type: ignore

    assert list(category.channels) == [CHANNEL_ID]  # type: ignore
    assert text.category is category  # type: ignore

    with pytest.raises(guildkit.InvalidData):
        parser.parse_channel({'id': snowflake(25), 'type': 99})


def test_parse_guild_updates_in_place():
    state, _, guild = setup()
    role = guild.roles[ROLE_ID]

    data = guild_payload(GUILD_ID, OWNER_ID, roles=[role_payload(ROLE_ID, position=4, name='renamed')])
    data['name'] = 'new name'
    again = state.parser.parse_guild(data)

    assert again is guild
    assert guild.name == 'new name'
    assert guild.roles[ROLE_ID] is role
    assert role.name == 'renamed'
    assert role.position == 4


@pytest.mark.asyncio
async def test_channel_send():
    state, http, guild = setup()
    channel = state.parser.parse_channel(channel_payload(CHANNEL_ID, GUILD_ID))

    http.queue('send_message', guildkit.Response(data=message_payload(snowflake(70), CHANNEL_ID, ME_ID, 'hello')))
    message = await channel.send('hello', files=[guildkit.File('a.txt', b'a')])  # type: ignore

    assert isinstance(message, guildkit.Message)
    assert message.content == 'hello'
    assert message.author is state.me

    [(args, kwargs)] = http.called('send_message')
    assert args[0] == CHANNEL_ID
    assert args[1]['content'] == 'hello'
    assert args[1]['attachments'] == [{'id': 0, 'filename': 'a.txt', 'description': None}]
    assert kwargs == {'files': (guildkit.File('a.txt', b'a'),)}

    http.queue('send_message', error(403))
    result = await channel.send('nope')  # type: ignore
    assert isinstance(result, guildkit.Forbidden)


@pytest.mark.asyncio
async def test_channel_delete():
    state, http, guild = setup()
    channel = guild.channels._store(state.parser.parse_channel(channel_payload(CHANNEL_ID, GUILD_ID)))  # type: ignore

    response = await channel.delete(reason='cleanup')

    assert response.ok
    assert CHANNEL_ID not in state.channels
    assert CHANNEL_ID not in guild.channels.cache
    [(_, kwargs)] = http.called('request')
    assert kwargs == {'reason': 'cleanup'}


@pytest.mark.asyncio
async def test_message_reply_and_edit():
    state, http, guild = setup()
    message = state.parser.parse_message(message_payload(snowflake(70), CHANNEL_ID, USER_ID, 'hi', guild_id=GUILD_ID))

    http.queue('send_message', guildkit.Response(data=message_payload(snowflake(71), CHANNEL_ID, ME_ID, 'hey')))
    reply = await message.reply('hey', mention=True)
    assert isinstance(reply, guildkit.Message)

    [(args, _)] = http.called('send_message')
    assert args[1]['message_reference'] == {'message_id': message.id}
    assert args[1]['allowed_mentions'] == {'replied_user': True}

    http.queue(
        'edit_message',
        guildkit.Response(data=message_payload(message.id, CHANNEL_ID, USER_ID, 'edited', edited_timestamp='2024-01-02T00:00:00+00:00')),
    )
    assert await message.edit({'content': 'edited'}) is message
    assert message.content == 'edited'
    assert message.edited_at == datetime(2024, 1, 2, tzinfo=timezone.utc)
    [(args, _)] = http.called('edit_message')
    assert args == (CHANNEL_ID, message.id, {'content': 'edited'})

    assert message.jump_url == f'https://discord.com/channels/{GUILD_ID}/{CHANNEL_ID}/{message.id}'


@pytest.mark.asyncio
async def test_member_actions():
    state, http, guild = setup()
    member = guild.members._store(state.parser.parse_member(member_payload(USER_ID, roles=[ROLE_ID]), GUILD_ID))

    http.queue('edit_guild_member', guildkit.Response(data=member_payload(USER_ID, nick='renamed')))
    assert await member.edit({'nick': 'renamed'}, reason=' moderation ') is True
    assert member.nick == 'renamed'
    [(args, kwargs)] = http.called('edit_guild_member')
    assert args == (GUILD_ID, USER_ID, {'nick': 'renamed'})
    assert kwargs == {'reason': 'moderation'}

    http.queue('edit_guild_member', error(403))
    assert await member.edit(mute=True) is False

    await member.kick(reason='bye')
    assert http.called('kick_guild_member') == [((GUILD_ID, USER_ID), {'reason': 'bye'})]

    await member.ban(reason='bye', delete_message_seconds=60)
    assert http.called('ban_guild_member') == [((GUILD_ID, USER_ID), {'delete_message_seconds': 60, 'reason': 'bye'})]

    response = await member.change_nickname(None)
    assert response.ok
    assert member.nick is None

    with pytest.raises(TypeError):
        await member.leave()


@pytest.mark.asyncio
async def test_self_member_nickname():
    state, http, guild = setup()
    me = guild.members._store(state.parser.parse_member(member_payload(ME_ID), GUILD_ID))

    assert me.is_me()
    assert guild.me is me
    await me.change_nickname('bot', reason='rename')
    assert http.called('edit_my_guild_member') == [((GUILD_ID, {'nick': 'bot'}), {'reason': 'rename'})]
    assert http.called('edit_guild_member') == []

    await me.leave()
    assert http.called('leave_guild') == [((GUILD_ID,), {})]


@pytest.mark.asyncio
async def test_role_edit_and_delete():
    state, http, guild = setup()
    role = guild.roles[ROLE_ID]

    updated = role_payload(ROLE_ID, position=1, name='mods', permissions=2)
    http.queue('edit_role', guildkit.Response(data=updated))
    assert await role.edit(name='mods', permissions=guildkit.Permissions(kick_members=True)) is role
    assert role.name == 'mods'
    assert role.permissions.kick_members is True
    [(args, _)] = http.called('edit_role')
    assert args == (GUILD_ID, ROLE_ID, {'name': 'mods', 'permissions': '2'})

    http.queue('edit_role_positions', guildkit.Response(data=[role_payload(ROLE_ID, position=3, name='mods')]))
    assert await role.set_position(3) is role
    assert role.position == 3
    assert len(http.called('edit_role')) == 1

    http.queue('delete_role', error(404))
    assert await role.delete() is False
    assert ROLE_ID in guild.roles

    assert await role.delete(reason='unused') is True
    assert ROLE_ID not in guild.roles


@pytest.mark.asyncio
async def test_client_user_edit():
    state, http, _ = setup()
    me = state.me
    assert me is not None

    http.queue('edit_my_user', guildkit.Response(data=user_payload(ME_ID, 'renamed')))
    assert await me.edit_username('renamed') is me
    assert me.name == 'renamed'
    assert http.called('edit_my_user') == [(({'username': 'renamed'},), {})]

    http.queue('edit_my_user', guildkit.Response(data=user_payload(ME_ID, 'renamed', avatar='abc')))
    await me.edit_avatar(b'\x89PNG\r\n\x1a\n')
    [_, (args, _)] = http.called('edit_my_user')
    assert args[0]['avatar'].startswith('data:image/png;base64,')


def test_member_shares_user():
    state, _, guild = setup()
    member = state.parser.parse_member(member_payload(USER_ID), GUILD_ID)
    message = state.parser.parse_message(message_payload(snowflake(70), CHANNEL_ID, USER_ID))

    assert member.user is message.author
    assert message.author is state.users[USER_ID]
    assert member.display_name == member.user.display_name
