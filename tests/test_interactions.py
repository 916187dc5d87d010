from __future__ import annotations

import pytest
import guildkit

from factories import (
    error,
    guild_payload,
    interaction_payload,
    make_state,
    message_payload,
    snowflake,
)

GUILD_ID = snowflake(1)
USER_ID = snowflake(3)
INTERACTION_ID = snowflake(50)
APPLICATION_ID = snowflake(999)
CHANNEL_ID = snowflake(500)


def slash(state: guildkit.State, **kwargs) -> guildkit.ApplicationCommandInteraction:
    interaction = state.parser.parse_interaction(
        interaction_payload(
            INTERACTION_ID,
            user_id=USER_ID,
            data={
                'id': snowflake(60),
                'name': 'ping',
                'type': 1,
                'options': [{'name': 'count', 'type': 4, 'value': 3}],
            },
            **kwargs,
        )
    )
    assert isinstance(interaction, guildkit.ApplicationCommandInteraction)
    return interaction


def response_message(content: str = '') -> dict:
    return message_payload(snowflake(70), CHANNEL_ID, APPLICATION_ID, content)


def test_parse_interaction():
    state, _ = make_state()
    state.parser.parse_guild(guild_payload(GUILD_ID, snowflake(2)))

    interaction = slash(state, guild_id=GUILD_ID)

    assert interaction.type is guildkit.InteractionType.application_command
    assert interaction.is_slash()
    assert not interaction.is_user()
    assert not interaction.is_message()
    assert not interaction.is_component()
    assert interaction.command_name == 'ping'
    assert interaction.get_option('count') == 3
    assert interaction.get_option('missing', 'default') == 'default'

    assert interaction.member is not None
    assert interaction.user is interaction.member.user
    assert interaction.user is state.users[USER_ID]
    assert interaction.guild is state.guilds[GUILD_ID]
    assert interaction.guild.members.cache[USER_ID] is interaction.member
    assert interaction.response_state is guildkit.InteractionResponseState.received

    dm = slash(state)
    assert dm.member is None
    assert dm.guild is None
    assert dm.user is state.users[USER_ID]


@pytest.mark.asyncio
async def test_reply():
    state, http = make_state()
    interaction = slash(state)

    response = await interaction.reply('pong', ephemeral=True)

    assert isinstance(response, guildkit.Response)
    assert interaction.response_state is guildkit.InteractionResponseState.replied
    assert interaction.is_responded()

    [(args, kwargs)] = http.called('create_interaction_response')
    assert args[:2] == (INTERACTION_ID, 'interaction-token')
    assert args[2]['type'] == 4
    assert args[2]['data']['content'] == 'pong'
    assert args[2]['data']['flags'] == 64
    assert kwargs == {'files': ()}

    with pytest.raises(guildkit.InteractionResponded):
        await interaction.reply('again')
    with pytest.raises(guildkit.InteractionResponded):
        await interaction.defer_reply()
    with pytest.raises(guildkit.InteractionResponded):
        await interaction.modal({'custom_id': 'm', 'title': 'M', 'components': []})


@pytest.mark.asyncio
async def test_reply_fetches_response():
    state, http = make_state()
    interaction = slash(state)

    http.queue('get_webhook_message', guildkit.Response(data=response_message('pong')))
    message = await interaction.reply({'content': 'pong', 'fetch_response': True})

    assert isinstance(message, guildkit.InteractionResponse)
    assert message.content == 'pong'
    assert message.token == 'interaction-token'
    assert message.interaction_id == INTERACTION_ID
    assert http.called('get_webhook_message') == [((APPLICATION_ID, 'interaction-token'), {})]


@pytest.mark.asyncio
async def test_failed_reply_keeps_state():
    state, http = make_state()
    interaction = slash(state)

    http.queue('create_interaction_response', error(404))
    response = await interaction.reply('pong', fetch_reply=True)

    assert isinstance(response, guildkit.Response)
    assert isinstance(response.error, guildkit.NotFound)
    assert interaction.response_state is guildkit.InteractionResponseState.received
    assert http.called('get_webhook_message') == []


@pytest.mark.asyncio
async def test_defer_then_edit_and_follow_up():
    state, http = make_state()
    interaction = slash(state)

    with pytest.raises(guildkit.InteractionNotResponded):
        await interaction.edit_reply('too early')
    with pytest.raises(guildkit.InteractionNotResponded):
        await interaction.follow_up('too early')

    await interaction.defer_reply(ephemeral=True)
    [(args, _)] = http.called('create_interaction_response')
    assert args[2] == {'type': 5, 'data': {'flags': 64}}
    assert interaction.response_state is guildkit.InteractionResponseState.deferred

    http.queue('edit_webhook_message', guildkit.Response(data=response_message('done')))
    edited = await interaction.edit_reply('done')
    assert isinstance(edited, guildkit.InteractionResponse)
    assert edited.content == 'done'
    [(args, _)] = http.called('edit_webhook_message')
    assert args == (APPLICATION_ID, 'interaction-token', '@original', {'content': 'done'})

    http.queue('execute_webhook', guildkit.Response(data=response_message('more')))
    followed = await interaction.follow_up('more', ephemeral=True)
    assert isinstance(followed, guildkit.InteractionResponse)
    [(args, _)] = http.called('execute_webhook')
    assert args[2]['content'] == 'more'
    assert args[2]['flags'] == 64

    http.queue('execute_webhook', error(401))
    failed = await interaction.follow_up('expired')
    assert isinstance(failed, guildkit.Unauthorized)


@pytest.mark.asyncio
async def test_defer_not_ephemeral():
    state, http = make_state()
    interaction = slash(state)

    await interaction.defer_reply()
    [(args, _)] = http.called('create_interaction_response')
    assert args[2] == {'type': 5, 'data': {'flags': 0}}


@pytest.mark.asyncio
async def test_response_message_goes_through_webhook():
    state, http = make_state()
    interaction = slash(state)
    await interaction.reply('hi')

    http.queue('get_webhook_message', guildkit.Response(data=response_message('hi')))
    message = await interaction.fetch_reply()
    assert isinstance(message, guildkit.InteractionResponse)

    http.queue('edit_webhook_message', guildkit.Response(data=response_message('edited')))
    assert await message.edit('edited') is message
    assert message.content == 'edited'
    [(args, _)] = http.called('edit_webhook_message')
    assert args[:3] == (APPLICATION_ID, 'interaction-token', message.id)

    await message.delete()
    assert http.called('delete_webhook_message') == [((APPLICATION_ID, 'interaction-token', message.id), {})]
    with pytest.raises(TypeError):
        await message.delete(reason='cleanup')  # type: ignore

    await interaction.delete_reply()
    assert http.called('delete_webhook_message')[-1] == ((APPLICATION_ID, 'interaction-token'), {})


@pytest.mark.asyncio
async def test_modal():
    state, http = make_state()
    interaction = slash(state)

    response = await interaction.show_modal(
        {
            'custom_id': 'feedback',
            'title': 'Feedback',
            'components': [guildkit.TextInput('text', 'Text')],
        }
    )
    assert response.ok
    assert interaction.response_state is guildkit.InteractionResponseState.modal

    [(args, _)] = http.called('create_interaction_response')
    assert args[2]['type'] == 9
    assert args[2]['data']['components'][0]['type'] == 1
    assert args[2]['data']['components'][0]['components'][0]['custom_id'] == 'text'

    with pytest.raises(guildkit.InteractionNotResponded):
        await interaction.edit_reply('no')


def test_component_and_modal_submit():
    state, _ = make_state()

    interaction = state.parser.parse_interaction(
        interaction_payload(
            snowflake(51),
            type=3,
            user_id=USER_ID,
            data={'custom_id': 'select', 'component_type': 3, 'values': ['a', 'b']},
        )
    )
    assert isinstance(interaction, guildkit.ComponentInteraction)
    assert interaction.is_component()
    assert interaction.custom_id == 'select'
    assert interaction.component_type is guildkit.ComponentType.string_select
    assert interaction.values == ['a', 'b']

    interaction = state.parser.parse_interaction(
        interaction_payload(
            snowflake(52),
            type=5,
            user_id=USER_ID,
            data={
                'custom_id': 'feedback',
                'components': [
                    {'type': 1, 'components': [{'type': 4, 'custom_id': 'name', 'value': 'Alice'}]},
                    {'type': 1, 'components': [{'type': 4, 'custom_id': 'text', 'value': 'Hello'}]},
                ],
            },
        )
    )
    assert isinstance(interaction, guildkit.ModalSubmitInteraction)
    assert interaction.is_component()
    assert list(interaction.inputs) == ['name', 'text']
    assert interaction.get_input('text') == 'Hello'
    assert interaction.get_input('missing') is None
