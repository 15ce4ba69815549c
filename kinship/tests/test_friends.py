import os
import pytest
from kinship.file_storage import UPLOAD_DIR

SARAH = {
    'first_name': 'Sarah',
    'last_name': 'Chen',
    'location': 'San Francisco, CA',
    'neighborhood': 'Mission District',
    'category': 'close_friends',
    'relationship_level': 'close',
    'interests': ['Photography', 'Hiking'],
    'notes': 'Amazing photographer',
    'contact_info': {'phone': '+1-415-555-0123'},
}


async def add_friend(client, headers, **fields):
    res = await client.post('/api/friends', json=fields, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()


@pytest.mark.asyncio
async def test_create_friend_and_list(client, auth_headers):
    friend = await add_friend(client, auth_headers, **SARAH)
    assert friend['id']
    assert friend['category'] == 'close_friends'
    assert friend['interests'] == ['Photography', 'Hiking']
    assert friend['contact_info'] == {'phone': '+1-415-555-0123'}

    res = await client.get('/api/friends', headers=auth_headers)
    assert res.status_code == 200
    assert [f['id'] for f in res.json()] == [friend['id']]

    detail = await client.get(f"/api/friends/{friend['id']}", headers=auth_headers)
    assert detail.json()['first_name'] == 'Sarah'


@pytest.mark.asyncio
async def test_create_friend_defaults(client, auth_headers):
    friend = await add_friend(client, auth_headers, first_name='Jake')
    assert friend['category'] == 'friends'
    assert friend['relationship_level'] == 'acquaintance'
    assert friend['interests'] == []
    assert friend['has_kids'] is False


@pytest.mark.asyncio
async def test_create_friend_rejects_unknown_category(client, auth_headers):
    res = await client.post('/api/friends', json={'first_name': 'X', 'category': 'frenemies'}, headers=auth_headers)
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_list_filters_and_ordering(client, auth_headers):
    await add_friend(client, auth_headers, **SARAH)
    await add_friend(client, auth_headers, first_name='Marcus', location='New York, NY', category='work_friends',
                     relationship_level='work')
    await add_friend(client, auth_headers, first_name='Alex', last_name='Thompson', location='Seattle, WA',
                     notes='Great cook')

    res = await client.get('/api/friends', headers=auth_headers)
    assert [f['first_name'] for f in res.json()] == ['Alex', 'Marcus', 'Sarah']

    res = await client.get('/api/friends', params={'category': 'work_friends'}, headers=auth_headers)
    assert [f['first_name'] for f in res.json()] == ['Marcus']

    res = await client.get('/api/friends', params={'location': 'san francisco'}, headers=auth_headers)
    assert [f['first_name'] for f in res.json()] == ['Sarah']

    res = await client.get('/api/friends', params={'relationship_level': 'close'}, headers=auth_headers)
    assert [f['first_name'] for f in res.json()] == ['Sarah']

    res = await client.get('/api/friends', params={'search': 'COOK'}, headers=auth_headers)
    assert [f['first_name'] for f in res.json()] == ['Alex']

    res = await client.get('/api/friends', params={'search': 'chen'}, headers=auth_headers)
    assert [f['first_name'] for f in res.json()] == ['Sarah']


@pytest.mark.asyncio
async def test_friends_are_scoped_to_owner(client, auth_headers, login_as):
    friend = await add_friend(client, auth_headers, **SARAH)
    bob = await login_as('bob@example.com')

    assert (await client.get('/api/friends', headers=bob)).json() == []
    assert (await client.get(f"/api/friends/{friend['id']}", headers=bob)).status_code == 404
    res = await client.patch(f"/api/friends/{friend['id']}", json={'notes': 'mine now'}, headers=bob)
    assert res.status_code == 404
    assert (await client.delete(f"/api/friends/{friend['id']}", headers=bob)).status_code == 404

    still = await client.get(f"/api/friends/{friend['id']}", headers=auth_headers)
    assert still.json()['notes'] == 'Amazing photographer'


@pytest.mark.asyncio
async def test_update_records_activity(client, auth_headers):
    friend = await add_friend(client, auth_headers, **SARAH)

    res = await client.patch(f"/api/friends/{friend['id']}", json={'notes': 'Loves film cameras'}, headers=auth_headers)
    assert res.status_code == 200
    assert res.json()['notes'] == 'Loves film cameras'
    assert res.json()['location'] == 'San Francisco, CA'

    res = await client.put(f"/api/friends/{friend['id']}", json={'location': 'Oakland, CA'}, headers=auth_headers)
    assert res.status_code == 200

    activities = (await client.get(f"/api/friends/{friend['id']}/activities", headers=auth_headers)).json()
    assert [a['activity_type'] for a in activities] == ['moved', 'updated', 'added']
    assert activities[0]['description'] == 'Sarah Chen moved to Oakland, CA'
    assert activities[1]['description'] == "Updated Sarah Chen's information"
    assert activities[2]['description'] == 'Added Sarah Chen to your friends'


@pytest.mark.asyncio
async def test_delete_friend(client, auth_headers):
    friend = await add_friend(client, auth_headers, **SARAH)
    res = await client.delete(f"/api/friends/{friend['id']}", headers=auth_headers)
    assert res.status_code == 204
    assert (await client.get(f"/api/friends/{friend['id']}", headers=auth_headers)).status_code == 404
    assert (await client.delete(f"/api/friends/{friend['id']}", headers=auth_headers)).status_code == 404
    assert (await client.get('/api/activities', headers=auth_headers)).json() == []


@pytest.mark.asyncio
async def test_introduced_by_must_be_own_other_friend(client, auth_headers, login_as):
    sarah = await add_friend(client, auth_headers, **SARAH)
    alex = await add_friend(client, auth_headers, first_name='Alex', introduced_by=sarah['id'])
    assert alex['introduced_by'] == sarah['id']

    res = await client.patch(f"/api/friends/{alex['id']}", json={'introduced_by': alex['id']}, headers=auth_headers)
    assert res.status_code == 400

    bob = await login_as('bob@example.com')
    res = await client.post('/api/friends', json={'first_name': 'Eve', 'introduced_by': sarah['id']}, headers=bob)
    assert res.status_code == 400

    # deleting the introducer clears the reference
    await client.delete(f"/api/friends/{sarah['id']}", headers=auth_headers)
    alex = (await client.get(f"/api/friends/{alex['id']}", headers=auth_headers)).json()
    assert alex['introduced_by'] is None


@pytest.mark.asyncio
async def test_record_interaction(client, auth_headers):
    friend = await add_friend(client, auth_headers, **SARAH)
    assert friend['last_interaction'] is None

    res = await client.post(f"/api/friends/{friend['id']}/interactions", json={'note': 'Coffee in the Mission'},
                            headers=auth_headers)
    assert res.status_code == 200
    assert res.json()['last_interaction'] is not None

    latest = (await client.get(f"/api/friends/{friend['id']}/activities", headers=auth_headers)).json()[0]
    assert latest['activity_type'] == 'interacted'
    assert latest['description'] == 'Caught up with Sarah Chen: Coffee in the Mission'

    res = await client.post('/api/friends/9999/interactions', headers=auth_headers)
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_bulk_create(client, auth_headers):
    res = await client.post('/api/friends/bulk', json=[
        {'first_name': 'Ann', 'photo': 'data:image/jpeg;base64,AAAA'},
        {'first_name': 'Ben', 'last_name': 'Ode'},
    ], headers=auth_headers)
    assert res.status_code == 201, res.text
    assert [f['first_name'] for f in res.json()] == ['Ann', 'Ben']

    activities = (await client.get('/api/activities', headers=auth_headers)).json()
    assert {a['activity_type'] for a in activities} == {'imported'}

    res = await client.post('/api/friends/bulk', json=[], headers=auth_headers)
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_photo_upload_replaces_previous(client, auth_headers, png_bytes):
    friend = await add_friend(client, auth_headers, **SARAH)

    res = await client.post(f"/api/friends/{friend['id']}/photo",
                            files={'file': ('sarah.png', png_bytes(), 'image/png')}, headers=auth_headers)
    assert res.status_code == 200, res.text
    first_url = res.json()['photo']
    assert first_url.startswith('/static/friend_photos/friend_')
    assert first_url.endswith('.jpg')
    assert os.path.exists(os.path.join(UPLOAD_DIR, first_url.split('/')[-1]))

    served = await client.get(first_url)
    assert served.status_code == 200

    res = await client.post(f"/api/friends/{friend['id']}/photo",
                            files={'file': ('sarah2.jpg', png_bytes(color=(10, 20, 30)), 'image/jpeg')},
                            headers=auth_headers)
    assert res.status_code == 200
    assert res.json()['photo'] != first_url
    assert not os.path.exists(os.path.join(UPLOAD_DIR, first_url.split('/')[-1]))


@pytest.mark.asyncio
async def test_photo_upload_rejects_non_images(client, auth_headers):
    friend = await add_friend(client, auth_headers, **SARAH)
    res = await client.post(f"/api/friends/{friend['id']}/photo",
                            files={'file': ('notes.txt', b'hello', 'text/plain')}, headers=auth_headers)
    assert res.status_code == 400

    res = await client.post(f"/api/friends/{friend['id']}/photo",
                            files={'file': ('fake.png', b'not really a png', 'image/png')}, headers=auth_headers)
    assert res.status_code == 400
    assert res.json()['message'] == 'Invalid image file'


@pytest.mark.asyncio
async def test_update_rejects_null_for_required_fields(client, auth_headers):
    friend = await add_friend(client, auth_headers, **SARAH)
    for field in ('first_name', 'category', 'relationship_level', 'interests'):
        for method in (client.patch, client.put):
            res = await method(f"/api/friends/{friend['id']}", json={field: None}, headers=auth_headers)
            assert res.status_code == 400, (field, res.text)
            assert res.json()['message'] == 'Invalid request data'

    # nullable fields can still be cleared
    res = await client.patch(f"/api/friends/{friend['id']}", json={'notes': None}, headers=auth_headers)
    assert res.status_code == 200
    assert res.json()['notes'] is None
    assert res.json()['category'] == SARAH['category']
