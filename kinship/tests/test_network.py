import random
from types import SimpleNamespace
import pytest
from kinship.network import (
    build_network,
    introduction_chains,
    location_clusters,
    name_game_round,
    NotEnoughPhotos,
)


def friend(id, first_name, last_name=None, level='friend', introduced_by=None, location=None, neighborhood=None,
           photo=None):
    return SimpleNamespace(
        id=id, first_name=first_name, last_name=last_name, relationship_level=level,
        introduced_by=introduced_by, location=location, neighborhood=neighborhood, photo=photo,
        full_name=f"{first_name} {last_name or ''}".strip(),
    )


def test_introduction_chains_largest_first():
    friends = [
        friend(1, 'Sarah'), friend(2, 'Alex', introduced_by=1), friend(3, 'Nina', introduced_by=4),
        friend(4, 'Lisa'), friend(5, 'Jake', introduced_by=1), friend(6, 'Ghost', introduced_by=99),
    ]
    chains = introduction_chains(friends)
    assert [c['introducer'].first_name for c in chains] == ['Sarah', 'Lisa']
    assert [f.first_name for f in chains[0]['introduced']] == ['Alex', 'Jake']


def test_location_clusters():
    friends = [
        friend(1, 'Sarah', location='San Francisco, CA', neighborhood='Mission'),
        friend(2, 'Nina', location='San Francisco, CA', neighborhood='Mission'),
        friend(3, 'Raj', location='San Francisco, CA'),
        friend(4, 'Marcus', location='New York, NY'),
        friend(5, 'Nomad'),
    ]
    clusters = location_clusters(friends)
    assert [(c['city'], c['total_friends']) for c in clusters] == [('San Francisco, CA', 3), ('New York, NY', 1)]
    hoods = clusters[0]['neighborhoods']
    assert [(n['neighborhood'], n['count']) for n in hoods] == [('Mission', 2), ('Other areas', 1)]


def test_location_clusters_top_five():
    friends = [friend(i, f'F{i}', location=f'City {i}') for i in range(8)]
    assert len(location_clusters(friends)) == 5


def test_build_network_levels():
    friends = [friend(1, 'A', level='close'), friend(2, 'B', level='close'), friend(3, 'C', level='work')]
    network = build_network(friends)
    assert network['levels'] == {'acquaintance': 0, 'friend': 0, 'close': 2, 'work': 1}
    assert network['introduction_chains'] == []
    assert network['location_clusters'] == []


def test_name_game_round():
    friends = [friend(i, name, photo=f'/static/friend_photos/{i}.jpg')
               for i, name in enumerate(['Ann', 'Ben', 'Cat', 'Dan', 'Eve'], start=1)]
    friends.append(friend(6, 'Nophoto'))
    round_ = name_game_round(friends, rng=random.Random(7))
    assert len(round_['options']) == 4
    assert len(set(round_['options'])) == 4
    assert round_['answer'] in round_['options']
    assert 'Nophoto' not in round_['options']
    target = next(f for f in friends if f.id == round_['friend_id'])
    assert round_['answer'] == target.full_name
    assert round_['photo'] == target.photo


def test_name_game_needs_four_photos():
    friends = [friend(i, f'F{i}', photo='x.jpg') for i in range(3)] + [friend(9, 'NoPic')]
    with pytest.raises(NotEnoughPhotos):
        name_game_round(friends)


@pytest.mark.asyncio
async def test_network_endpoints(client, auth_headers):
    sarah = (await client.post('/api/friends', json={
        'first_name': 'Sarah', 'location': 'Austin, TX', 'relationship_level': 'close',
    }, headers=auth_headers)).json()
    await client.post('/api/friends', json={
        'first_name': 'Alex', 'location': 'Austin, TX', 'neighborhood': 'East Side', 'introduced_by': sarah['id'],
    }, headers=auth_headers)

    res = await client.get('/api/network', headers=auth_headers)
    assert res.status_code == 200, res.text
    body = res.json()
    assert body['levels']['close'] == 1
    assert body['introduction_chains'][0]['introducer']['id'] == sarah['id']
    assert body['introduction_chains'][0]['introduced'][0]['first_name'] == 'Alex'
    assert body['location_clusters'][0]['city'] == 'Austin, TX'
    assert body['location_clusters'][0]['total_friends'] == 2

    res = await client.get('/api/name-game', headers=auth_headers)
    assert res.status_code == 409

    for name in ('Ann', 'Ben', 'Cat', 'Dan'):
        await client.post('/api/friends', json={'first_name': name, 'photo': f'/static/friend_photos/{name}.jpg'},
                          headers=auth_headers)
    res = await client.get('/api/name-game', headers=auth_headers)
    assert res.status_code == 200
    assert sorted(res.json()['options']) == ['Ann', 'Ben', 'Cat', 'Dan']


def test_name_game_options_are_distinct_names():
    friends = [friend(i, name, last_name='Lee', photo=f'{i}.jpg')
               for i, name in enumerate(['Ann', 'Ann', 'Ann', 'Ben', 'Cat', 'Dan'], start=1)]
    for seed in range(20):
        round_ = name_game_round(friends, rng=random.Random(seed))
        assert len(set(round_['options'])) == 4
        assert round_['options'].count(round_['answer']) == 1


def test_name_game_needs_four_distinct_names():
    friends = [friend(i, 'Sam', photo=f'{i}.jpg') for i in range(5)] + [friend(9, 'Tom', photo='t.jpg')]
    with pytest.raises(NotEnoughPhotos):
        name_game_round(friends)
