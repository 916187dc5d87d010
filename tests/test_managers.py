from __future__ import annotations

import asyncio
import logging

import pytest
import guildkit

from factories import (
    channel_payload,
    error,
    guild_payload,
    make_state,
    member_payload,
    role_payload,
    snowflake,
)

GUILD_ID = snowflake(1)
OWNER_ID = snowflake(2)


def make_guild(state: guildkit.State) -> guildkit.Guild:
    return state.parser.parse_guild(guild_payload(GUILD_ID, OWNER_ID))


@pytest.mark.asyncio
async def test_short_id_fetches_everything():
    state, http = make_state()
    guild = make_guild(state)

    http.queue(
        'get_guild_channels',
        guildkit.Response(
            data=[
                channel_payload(snowflake(20), GUILD_ID, name='general'),
                channel_payload(snowflake(21), GUILD_ID, type=2, name='voice'),
            ]
        ),
    )

    result = await guild.channels.fetch('123456789012345')

    assert isinstance(result, guildkit.Collection)
    assert list(result) == [snowflake(20), snowflake(21)]
    assert http.called('get_channel') == []
    assert guild.channels.status is guildkit.ManagerState.populated
    assert isinstance(result[snowflake(21)], guildkit.VoiceChannel)

    result = await guild.channels.fetch()
    assert isinstance(result, guildkit.Collection)
    assert len(http.called('get_guild_channels')) == 2


@pytest.mark.asyncio
async def test_snowflake_fetches_single_entity():
    state, http = make_state()
    guild = make_guild(state)

    channel_id = snowflake(20)
    assert len(channel_id) == 18
    http.queue('get_channel', guildkit.Response(data=channel_payload(channel_id, GUILD_ID)))

    channel = await guild.channels.fetch(channel_id)

    assert isinstance(channel, guildkit.TextChannel)
    assert http.called('get_channel') == [((channel_id,), {})]
    assert http.called('get_guild_channels') == []
    assert guild.channels.cache[channel_id] is channel
    assert state.channels[channel_id] is channel


@pytest.mark.asyncio
async def test_seventeen_character_id_is_single():
    state, http = make_state()
    guild = make_guild(state)

    user_id = '12345678901234567'
    http.queue('get_guild_member', guildkit.Response(data=member_payload(user_id)))

    member = await guild.members.fetch(user_id)

    assert isinstance(member, guildkit.Member)
    assert http.called('get_guild_member') == [((GUILD_ID, user_id), {})]
    assert member.user is state.users[user_id]


@pytest.mark.asyncio
async def test_single_fetch_raises():
    state, http = make_state()
    guild = make_guild(state)

    http.queue('get_channel', error(404))

    with pytest.raises(guildkit.NotFound):
        await guild.channels.fetch(snowflake(20))


@pytest.mark.asyncio
async def test_identity_through_client_cache():
    state, http = make_state()
    guild = make_guild(state)

    channel_id = snowflake(20)
    http.queue('get_guild_channels', guildkit.Response(data=[channel_payload(channel_id, GUILD_ID)]))
    await guild.channels.populate()

    assert guild.channels.cache[channel_id] is state.channels[channel_id]

    channel = state.channels[channel_id]
    channel.locally_update({'name': 'renamed'})
    assert guild.channels.cache[channel_id].name == 'renamed'


@pytest.mark.asyncio
async def test_failed_population_leaves_cache(caplog: pytest.LogCaptureFixture):
    state, http = make_state()
    guild = make_guild(state)

    channel_id = snowflake(20)
    http.queue('get_guild_channels', guildkit.Response(data=[channel_payload(channel_id, GUILD_ID)]))
    await guild.channels.populate()
    cached = guild.channels.cache[channel_id]

    http.queue('get_guild_channels', error(500))
    with caplog.at_level(logging.ERROR, logger='guildkit.managers'):
        result = await guild.channels.populate()

    assert result is guild.channels.cache
    assert guild.channels.cache[channel_id] is cached
    assert guild.channels.status is guildkit.ManagerState.populated
    assert 'Failed to populate channels' in caplog.text

    http.queue('get_guild_channels', OSError('connection reset'))
    with caplog.at_level(logging.ERROR, logger='guildkit.managers'):
        await guild.channels.populate()
    assert guild.channels.cache[channel_id] is cached


def test_no_running_loop_stays_uninitialized():
    state, http = make_state(populate_managers=True)
    guild = make_guild(state)

    assert guild.channels.status is guildkit.ManagerState.uninitialized
    assert guild.members.status is guildkit.ManagerState.uninitialized
    assert http.calls == []


@pytest.mark.asyncio
async def test_construction_schedules_population():
    state, http = make_state(populate_managers=True)
    http.queue('get_guild_members', guildkit.Response(data=[member_payload(snowflake(30))]))
    http.queue('get_guild_channels', guildkit.Response(data=[channel_payload(snowflake(20), GUILD_ID)]))

    guild = make_guild(state)

    await guild.channels.wait_until_populated()
    await guild.members.wait_until_populated()

    assert guild.channels.status is guildkit.ManagerState.populated
    assert snowflake(20) in state.channels
    assert snowflake(30) in guild.members.cache


@pytest.mark.asyncio
async def test_member_users_are_shared():
    state, http = make_state()
    guild = make_guild(state)
    user_id = snowflake(30)

    http.queue('get_guild_members', guildkit.Response(data=[member_payload(user_id)]))
    members = await guild.members.populate()

    user = state.users[user_id]
    assert members[user_id].user is user

    http.queue('get_guild_member', guildkit.Response(data=member_payload(user_id, nick='new')))
    member = await guild.members.fetch(user_id)
    assert member.user is user
    assert member.nick == 'new'
    assert guild.members.cache[user_id] is member


@pytest.mark.asyncio
async def test_member_roles():
    state, http = make_state()
    guild = make_guild(state)
    role_id = snowflake(10)
    user_id = snowflake(30)

    member = state.parser.parse_member(member_payload(user_id, roles=[role_id]), GUILD_ID)
    assert len(member.roles) == 0
    assert member.roles.highest is None

    http.queue(
        'get_guild_roles',
        guildkit.Response(data=[role_payload(GUILD_ID, name='@everyone'), role_payload(role_id, position=3)]),
    )
    roles = await member.roles.fetch()

    assert list(roles) == [role_id]
    assert roles[role_id] is guild.roles[role_id]
    assert member.roles.status is guildkit.ManagerState.populated
    assert member.roles.highest is guild.roles[role_id]

    http.queue('get_guild_roles', error(403))
    assert list(await member.roles.fetch()) == [role_id]

    await member.roles.add(snowflake(11), reason='promoted')
    assert http.called('add_guild_member_role') == [((GUILD_ID, user_id, snowflake(11)), {'reason': 'promoted'})]
    assert member.role_ids == (role_id,)


@pytest.mark.asyncio
async def test_member_roles_transport_failure(caplog: pytest.LogCaptureFixture):
    state, http = make_state()
    guild = make_guild(state)
    role_id = snowflake(10)

    member = state.parser.parse_member(member_payload(snowflake(30), roles=[role_id]), GUILD_ID)

    http.queue('get_guild_roles', OSError('connection reset'))
    with caplog.at_level(logging.ERROR, logger='guildkit.managers'):
        roles = await member.roles.fetch()

    assert len(roles) == 0
    assert member.roles.status is guildkit.ManagerState.uninitialized
    assert 'Failed to fetch roles' in caplog.text

    http.queue(
        'get_guild_roles',
        guildkit.Response(data=[role_payload(role_id, position=3)]),
        OSError('connection reset'),
    )
    await member.roles.fetch()
    cached = guild.roles[role_id]

    roles = await member.roles.fetch()
    assert roles[role_id] is cached
    assert member.roles.status is guildkit.ManagerState.populated


@pytest.mark.asyncio
async def test_overlapping_population_keeps_populated():
    state, http = make_state()
    guild = make_guild(state)
    channel_id = snowflake(20)

    gate = asyncio.Event()
    responses = [error(500), guildkit.Response(data=[channel_payload(channel_id, GUILD_ID)])]

    async def get_guild_channels(guild_id: str) -> guildkit.Response:
        response = responses.pop(0)
        if response.error is not None:
            await gate.wait()
        return response

    http.get_guild_channels = get_guild_channels

    slow = asyncio.create_task(guild.channels.populate())
    await asyncio.sleep(0)

    await guild.channels.populate()
    assert guild.channels.status is guildkit.ManagerState.populated

    gate.set()
    result = await slow

    assert result is guild.channels.cache
    assert channel_id in guild.channels.cache
    assert guild.channels.status is guildkit.ManagerState.populated
