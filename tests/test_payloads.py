from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import guildkit
from guildkit.utils import to_json

from factories import snowflake


def test_message_hello():
    payload = guildkit.MessagePayload('hello')

    assert payload.payload == {
        'content': 'hello',
        'tts': False,
        'embeds': None,
        'allowed_mentions': None,
        'message_reference': None,
        'components': None,
        'sticker_ids': None,
        'flags': None,
        'attachments': None,
    }
    assert list(payload.payload) == [
        'content',
        'tts',
        'embeds',
        'allowed_mentions',
        'message_reference',
        'components',
        'sticker_ids',
        'flags',
        'attachments',
    ]
    assert payload.files == ()
    assert payload.warnings == ()


def test_message_defaults():
    payload = guildkit.MessagePayload({}).payload
    assert payload['content'] == ''
    assert payload['tts'] is False

    with pytest.raises(TypeError):
        guildkit.MessagePayload(42)


def test_message_attachments_count_accepted_files_only():
    payload = guildkit.MessagePayload(
        {
            'content': 'files',
            'files': [
                {'name': 'a.png', 'url': 'https://example.com/a.png'},
                {'name': 'broken.png'},
                {'url': 'https://example.com/nameless.png'},
                'not a descriptor',
                {'name': 'b.txt', 'url': b'data', 'description': 'The B'},
            ],
        }
    )

    assert payload.payload['attachments'] == [
        {'id': 0, 'filename': 'a.png', 'description': None},
        {'id': 1, 'filename': 'b.txt', 'description': 'The B'},
    ]
    assert payload.files == (
        guildkit.File('a.png', 'https://example.com/a.png'),
        guildkit.File('b.txt', b'data'),
    )
    assert all(attachment['id'] == i for i, attachment in enumerate(payload.payload['attachments']))


def test_message_single_file_descriptor():
    payload = guildkit.MessagePayload('look', guildkit.File('cat.jpg', b'meow', description='A cat'))

    assert payload.payload['attachments'] == [{'id': 0, 'filename': 'cat.jpg', 'description': 'A cat'}]
    assert len(payload.files) == 1
    assert payload.files[0].name == 'cat.jpg'


def test_message_no_valid_files():
    payload = guildkit.MessagePayload({'files': [{'name': 'x'}]})
    assert payload.payload['attachments'] is None
    assert payload.files == ()


def test_mentions_are_ordered_and_case_insensitive():
    payload = guildkit.MessagePayload(
        {
            'content': 'ping',
            'mentions': {
                'parse': ['EVERYONE', 'bogus', 'Users'],
                'users': [],
                'roles': [snowflake(1)],
            },
        }
    )

    assert payload.payload['allowed_mentions'] == {
        'parse': ['users', 'everyone'],
        'users': None,
        'roles': [snowflake(1)],
    }


def test_mentions_helper():
    payload = guildkit.MessagePayload({'mentions': guildkit.Mentions.none()})
    assert payload.payload['allowed_mentions'] == {'parse': [], 'users': None, 'roles': None}

    payload = guildkit.MessagePayload({'mentions': guildkit.Mentions.all()})
    assert payload.payload['allowed_mentions'] == {
        'parse': ['users', 'roles', 'everyone'],
        'users': None,
        'roles': None,
        'replied_user': True,
    }


def test_building_is_idempotent():
    options = {
        'content': 'hi',
        'embeds': [{'title': 'Embed'}],
        'mentions': {'parse': ['roles', 'users']},
        'reply': {'id': snowflake(7), 'mention': True},
        'files': [{'name': 'a.txt', 'url': b'a'}],
        'stickers': [snowflake(8)],
    }

    first = guildkit.MessagePayload(options)
    second = guildkit.MessagePayload(options)

    assert to_json(first.build()) == to_json(second.build())
    assert first.build() == first.build()

    body = first.payload
    body['content'] = 'mutated'
    body['embeds'].append({'title': 'Another'})
    assert first.payload['content'] == 'hi'
    assert first.payload['embeds'] == [{'title': 'Embed'}]
    assert first.payload['sticker_ids'] == [snowflake(8)]


def test_reply_mention_is_merged_with_mentions():
    payload = guildkit.MessagePayload(
        {
            'content': 'hi',
            'reply': {'id': snowflake(7), 'mention': True},
            'mentions': {'parse': []},
        }
    )

    assert payload.payload['message_reference'] == {'message_id': snowflake(7)}
    assert payload.payload['allowed_mentions'] == {
        'parse': [],
        'users': None,
        'roles': None,
        'replied_user': True,
    }


def test_reply_forms():
    payload = guildkit.MessagePayload({'reply': {'id': snowflake(7), 'error': True}})
    assert payload.payload['message_reference'] == {'message_id': snowflake(7), 'fail_if_not_exists': True}
    assert payload.payload['allowed_mentions'] is None

    payload = guildkit.MessagePayload({'reply': guildkit.Reply(snowflake(7), mention=True)})
    assert payload.payload['message_reference'] == {'message_id': snowflake(7)}
    assert payload.payload['allowed_mentions'] == {'replied_user': True}

    payload = guildkit.MessagePayload({'reply': snowflake(7)})
    assert payload.payload['message_reference'] == {'message_id': snowflake(7)}


def test_transient_keys_never_reach_body():
    payload = guildkit.InteractionPayload(
        {
            'content': 'x',
            'reply': {'id': snowflake(1)},
            'mentions': {'parse': []},
            'files': [],
            'ephemeral': True,
            'fetch_reply': True,
        }
    )
    for key in ('reply', 'mentions', 'files', 'ephemeral', 'fetch_reply', 'fetch_response'):
        assert key not in payload.payload


def test_nonce_goes_last():
    payload = guildkit.MessagePayload({'content': 'x', 'nonce': 'abc'})
    assert list(payload.payload)[-1] == 'nonce'
    assert payload.payload['nonce'] == 'abc'


def test_strict_mode_collects_warnings():
    options = {
        'mentions': {'parse': ['users', 'bogus']},
        'files': [{'name': 'a.txt', 'url': b'a'}, {'name': 'missing-url'}],
    }

    lenient = guildkit.MessagePayload(options)
    assert lenient.warnings == ()

    strict = guildkit.MessagePayload(options, strict=True)
    assert strict.warnings == (
        guildkit.PayloadWarning('mention', "unknown mention type 'bogus'", 1),
        guildkit.PayloadWarning('file', 'file descriptor requires both name and url', 1),
    )
    assert strict.payload == lenient.payload


def test_interaction_ephemeral():
    assert guildkit.InteractionPayload({'content': 'x', 'ephemeral': True}).payload['flags'] == 64
    assert guildkit.InteractionPayload({'content': 'x', 'ephemeral': True, 'flags': 4}).payload['flags'] == 68
    assert guildkit.InteractionPayload({'content': 'x'}).payload['flags'] is None
    assert (
        guildkit.InteractionPayload({'content': 'x', 'flags': guildkit.MessageFlags(suppress_embeds=True)}).payload['flags']
        == 4
    )


def test_edit_message_sends_only_supplied_keys():
    assert guildkit.EditMessagePayload({}).payload == {}
    assert guildkit.EditMessagePayload('new').payload == {'content': 'new'}
    assert guildkit.EditMessagePayload({'embeds': []}).payload == {'embeds': []}
    assert guildkit.EditMessagePayload({'content': None}).payload == {'content': None}

    payload = guildkit.EditMessagePayload({'mentions': {'parse': ['Roles'], 'users': []}})
    assert payload.payload == {'allowed_mentions': {'parse': ['roles'], 'users': []}}


def test_edit_message_keeps_existing_attachments():
    payload = guildkit.EditMessagePayload(
        {
            'attachments': [{'id': snowflake(40)}],
            'files': [guildkit.File('a.txt', b'a')],
        }
    )
    assert payload.payload == {
        'attachments': [
            {'id': snowflake(40)},
            {'id': 0, 'filename': 'a.txt', 'description': None},
        ],
    }
    assert payload.files == (guildkit.File('a.txt', b'a'),)


def test_modal_wraps_text_inputs():
    row = {'type': 1, 'components': [guildkit.TextInput('b', 'B', style=guildkit.TextInputStyle.paragraph)]}
    payload = guildkit.ModalPayload(
        {
            'custom_id': 'feedback',
            'title': 'Feedback',
            'components': [guildkit.TextInput('a', 'A', max_length=100), row],
        }
    )

    assert payload.payload == {
        'custom_id': 'feedback',
        'title': 'Feedback',
        'components': [
            {'type': 1, 'components': [{'type': 4, 'custom_id': 'a', 'label': 'A', 'style': 1, 'max_length': 100}]},
            {'type': 1, 'components': [{'type': 4, 'custom_id': 'b', 'label': 'B', 'style': 2}]},
        ],
    }


def test_member_edit():
    payload = guildkit.MemberEditPayload(
        {
            'nick': 'nick',
            'roles': [snowflake(1), snowflake(2)],
            'mute': True,
            'reason': '  spamming  ',
        }
    )
    assert payload.reason == 'spamming'
    assert payload.payload == {'nick': 'nick', 'roles': [snowflake(1), snowflake(2)], 'mute': True}

    assert guildkit.MemberEditPayload({'reason': '   '}).reason is None
    assert guildkit.MemberEditPayload({'timeout': None}).payload == {'communication_disabled_until': None}

    until = datetime(2030, 1, 1, tzinfo=timezone.utc)
    payload = guildkit.MemberEditPayload({'communication_disabled_until': until})
    assert payload.payload == {'communication_disabled_until': '2030-01-01T00:00:00+00:00'}

    payload = guildkit.MemberEditPayload({'timeout': timedelta(minutes=5)})
    value = datetime.fromisoformat(payload.payload['communication_disabled_until'])
    assert value > datetime.now(timezone.utc)
