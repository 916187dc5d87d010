from __future__ import annotations

import errno
import json
import typing
from urllib.parse import quote

import aiohttp
from aiohttp import web
from aiohttp.test_utils import TestServer
import pytest
import guildkit

from factories import guild_payload, interaction_payload, snowflake, user_payload

USER_ID = snowflake(3)
GUILD_ID = snowflake(1)


class Recorder:
    def __init__(self) -> None:
        self.requests: list[dict[str, typing.Any]] = []


def make_app(recorder: Recorder) -> web.Application:
    rate_limited = {'done': False}

    async def get_user(request: web.Request) -> web.Response:
        recorder.requests.append({'headers': dict(request.headers), 'path': request.path})
        user_id = request.match_info['user_id']
        if user_id == '@me':
            return web.json_response(user_payload(USER_ID, 'me', bot=True, verified=True))
        if user_id == 'limited' and not rate_limited['done']:
            rate_limited['done'] = True
            return web.json_response({'message': 'You are being rate limited.', 'retry_after': 0, 'global': False}, status=429)
        if user_id == 'limited':
            return web.json_response(user_payload(USER_ID, 'finally'))
        return web.json_response({'message': 'Unknown User', 'code': 10013}, status=404)

    async def kick(request: web.Request) -> web.Response:
        recorder.requests.append({'headers': dict(request.headers), 'path': request.path})
        return web.Response(status=204)

    async def send_message(request: web.Request) -> web.Response:
        entry: dict[str, typing.Any] = {'headers': dict(request.headers), 'path': request.path, 'parts': {}}
        if request.content_type == 'multipart/form-data':
            reader = await request.multipart()
            async for part in reader:
                entry['parts'][part.name] = (part.filename, bytes(await part.read()))  # type: ignore
        else:
            entry['json'] = await request.json()
        recorder.requests.append(entry)
        return web.json_response({'id': snowflake(70)})

    async def callback(request: web.Request) -> web.Response:
        recorder.requests.append({'headers': dict(request.headers), 'path': request.path, 'json': await request.json()})
        return web.Response(status=204)

    async def get_guild(request: web.Request) -> web.Response:
        recorder.requests.append({'headers': dict(request.headers), 'path': request.path, 'query': dict(request.query)})
        return web.json_response(guild_payload(GUILD_ID, USER_ID))

    app = web.Application()
    app.router.add_get('/api/users/{user_id}', get_user)
    app.router.add_delete('/api/guilds/{guild_id}/members/{user_id}', kick)
    app.router.add_post('/api/channels/{channel_id}/messages', send_message)
    app.router.add_post('/api/interactions/{interaction_id}/{token}/callback', callback)
    app.router.add_get('/api/guilds/{guild_id}', get_guild)
    return app


def make_http(server: TestServer) -> guildkit.HTTPClient:
    state = guildkit.State()
    http = guildkit.HTTPClient(
        'secret',
        base=str(server.make_url('/api')),
        session=lambda _: aiohttp.ClientSession(),
        state=state,
    )
    state.setup(http=http)
    return http


@pytest.mark.asyncio
async def test_request_headers_and_data():
    recorder = Recorder()
    async with TestServer(make_app(recorder)) as server:
        http = make_http(server)
        try:
            response = await http.get_me()
        finally:
            await http.cleanup()

    assert response.ok
    assert response.unwrap()['username'] == 'me'

    [request] = recorder.requests
    assert request['path'] == '/api/users/@me'
    assert request['headers']['Authorization'] == 'Bot secret'
    assert request['headers']['User-Agent'] == guildkit.DEFAULT_HTTP_USER_AGENT


@pytest.mark.asyncio
async def test_errors_are_returned():
    recorder = Recorder()
    async with TestServer(make_app(recorder)) as server:
        http = make_http(server)
        try:
            response = await http.get_user(snowflake(4))
            with pytest.raises(guildkit.NotFound):
                await http.raw_request(guildkit.routes.USERS_FETCH.compile(user_id=snowflake(4)))
        finally:
            await http.cleanup()

    assert not response.ok
    assert isinstance(response.error, guildkit.NotFound)
    assert response.error.status == 404
    assert response.error.code == 10013
    assert response.error.text == 'Unknown User'
    with pytest.raises(guildkit.NotFound):
        response.unwrap()


@pytest.mark.asyncio
async def test_rate_limit_is_retried():
    recorder = Recorder()
    async with TestServer(make_app(recorder)) as server:
        http = make_http(server)
        try:
            response = await http.get_user('limited')
        finally:
            await http.cleanup()

    assert response.ok
    assert response.data['username'] == 'finally'
    assert len(recorder.requests) == 2


@pytest.mark.asyncio
async def test_audit_log_reason():
    recorder = Recorder()
    reason = 'spam in #general, see ticket #5'
    async with TestServer(make_app(recorder)) as server:
        http = make_http(server)
        try:
            response = await http.kick_guild_member(GUILD_ID, USER_ID, reason=reason)
        finally:
            await http.cleanup()

    assert response.ok
    assert response.data is None

    [request] = recorder.requests
    assert request['headers']['X-Audit-Log-Reason'] == quote(reason, safe='/ ')


@pytest.mark.asyncio
async def test_multipart_upload():
    recorder = Recorder()
    payload = guildkit.MessagePayload(
        {'content': 'files'},
        [guildkit.File('a.txt', b'first'), guildkit.File('b.bin', bytearray(b'second'))],
    )
    async with TestServer(make_app(recorder)) as server:
        http = make_http(server)
        try:
            response = await http.send_message(snowflake(20), payload.build(), files=payload.files)
            plain = await http.send_message(snowflake(20), guildkit.MessagePayload('plain').build())
        finally:
            await http.cleanup()

    assert response.ok
    assert plain.ok

    multipart, json_request = recorder.requests
    parts = multipart['parts']
    assert set(parts) == {'payload_json', 'files[0]', 'files[1]'}
    body = json.loads(parts['payload_json'][1])
    assert body['content'] == 'files'
    assert body['attachments'] == [
        {'id': 0, 'filename': 'a.txt', 'description': None},
        {'id': 1, 'filename': 'b.bin', 'description': None},
    ]
    assert parts['files[0]'] == ('a.txt', b'first')
    assert parts['files[1]'] == ('b.bin', b'second')

    assert json_request['json']['content'] == 'plain'
    assert json_request['headers']['Content-Type'] == 'application/json'


@pytest.mark.asyncio
async def test_interaction_callback_is_not_authenticated():
    recorder = Recorder()
    async with TestServer(make_app(recorder)) as server:
        http = make_http(server)
        interaction = http.state.parser.parse_interaction(interaction_payload(snowflake(50), user_id=USER_ID))
        try:
            await interaction.defer_reply()
        finally:
            await http.cleanup()

    [request] = recorder.requests
    assert 'Authorization' not in request['headers']
    assert request['path'] == f'/api/interactions/{snowflake(50)}/interaction-token/callback'
    assert request['json'] == {'type': 5, 'data': {'flags': 0}}


@pytest.mark.asyncio
async def test_client():
    recorder = Recorder()
    async with TestServer(make_app(recorder)) as server:
        async with guildkit.Client('secret', http_base=str(server.make_url('/api')), populate_managers=False) as client:
            me = await client.login()
            guild = await client.fetch_guild(GUILD_ID, with_counts=True)

            assert isinstance(me, guildkit.ClientUser)
            assert me.verified is True
            assert client.me is me
            assert client.user is me
            assert client.get_user(USER_ID) is me
            assert client.get_guild(GUILD_ID) is guild
            assert guild.owner_id == USER_ID
            assert guild.default_role is not None

            interaction = client.parse_interaction(interaction_payload(snowflake(50), guild_id=GUILD_ID, user_id=USER_ID))
            assert interaction.user is me
            assert guild.members.me is interaction.member

    assert client.closed
    assert recorder.requests[-1]['query'] == {'with_counts': 'true'}


class ResettingHTTPClient(guildkit.HTTPClient):
    attempts: int = 0

    async def send_request(self, session: aiohttp.ClientSession, /, **kwargs: typing.Any) -> aiohttp.ClientResponse:
        self.attempts += 1
        raise ConnectionResetError(errno.ECONNRESET, 'Connection reset by peer')


@pytest.mark.asyncio
async def test_connection_resets_count_against_retries():
    state = guildkit.State()
    http = ResettingHTTPClient('secret', max_retries=2, session=lambda _: aiohttp.ClientSession(), state=state)
    state.setup(http=http)
    try:
        with pytest.raises(ConnectionResetError):
            await http.get_me()
    finally:
        await http.cleanup()

    assert http.attempts == 2
