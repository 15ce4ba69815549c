import pytest
from unittest.mock import patch
from httpx import AsyncClient, ASGITransport
from kinship.main import app
from kinship.seed import SAMPLE_FRIENDS, seed_user, main as seed_main


@pytest.mark.asyncio
async def test_healthz(client):
    res = await client.get('/healthz')
    assert res.status_code == 200
    assert res.json() == {'status': 'ok'}


@pytest.mark.asyncio
async def test_requires_authentication(client):
    res = await client.get('/api/friends')
    assert res.status_code == 401
    assert res.json() == {'message': 'Could not validate credentials'}


@pytest.mark.asyncio
async def test_garbage_bearer_token_rejected(client):
    res = await client.get('/api/friends', headers={'Authorization': 'Bearer not-a-jwt'})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_validation_errors_are_400(client, auth_headers):
    res = await client.post('/api/friends', json={'last_name': 'Nameless'}, headers=auth_headers)
    assert res.status_code == 400
    body = res.json()
    assert body['message'] == 'Invalid request data'
    assert any(err['loc'][-1] == 'first_name' for err in body['errors'])


@pytest.mark.asyncio
async def test_http_errors_use_message_body(client, auth_headers):
    res = await client.get('/api/friends/9999', headers=auth_headers)
    assert res.status_code == 404
    assert res.json() == {'message': 'Friend not found'}


@pytest.mark.asyncio
async def test_unhandled_errors_are_500(auth_headers):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        with patch('kinship.routes.friends.list_friends', side_effect=RuntimeError('db exploded')):
            res = await ac.get('/api/friends', headers=auth_headers)
    assert res.status_code == 500
    assert res.json() == {'message': 'Internal server error'}


@pytest.mark.asyncio
async def test_seed_user(client, auth_headers):
    assert await seed_user('alice@example.com') == len(SAMPLE_FRIENDS)
    # a second run leaves existing friends alone
    assert await seed_user('alice@example.com') == 0

    friends = (await client.get('/api/friends', headers=auth_headers)).json()
    by_name = {f['first_name']: f for f in friends}
    assert by_name['Alex']['introduced_by'] == by_name['Sarah']['id']
    assert by_name['Marcus']['last_interaction'] is not None

    with pytest.raises(ValueError):
        await seed_user('nobody@example.com')


def test_seed_main_usage():
    assert seed_main([]) == 2
