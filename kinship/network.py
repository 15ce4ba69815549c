"""
Network views over a user's friends
Level counts, introduction chains, location clusters and the name game
"""

import random
from collections import Counter, defaultdict
from .constants import RELATIONSHIP_LEVELS

MAX_LOCATION_CLUSTERS = 5
NAME_GAME_OPTIONS = 4
DEFAULT_NEIGHBORHOOD = 'Other areas'


class NotEnoughPhotos(Exception):
    pass


def level_counts(friends) -> dict:
    counts = Counter(f.relationship_level for f in friends)
    return {level: counts.get(level, 0) for level in RELATIONSHIP_LEVELS}


def introduction_chains(friends) -> list[dict]:
    """Group friends under whoever introduced them, largest groups first"""
    by_id = {f.id: f for f in friends}
    introduced = defaultdict(list)
    for friend in friends:
        if friend.introduced_by in by_id:
            introduced[friend.introduced_by].append(friend)
    chains = [
        {'introducer': by_id[introducer_id], 'introduced': members}
        for introducer_id, members in introduced.items()
    ]
    chains.sort(key=lambda c: (-len(c['introduced']), c['introducer'].id))
    return chains


def location_clusters(friends, limit: int = MAX_LOCATION_CLUSTERS) -> list[dict]:
    cities = defaultdict(lambda: defaultdict(list))
    for friend in friends:
        if not friend.location:
            continue
        cities[friend.location][friend.neighborhood or DEFAULT_NEIGHBORHOOD].append(friend)

    clusters = []
    for city, neighborhoods in cities.items():
        hoods = [
            {'neighborhood': name, 'count': len(members), 'friends': members}
            for name, members in neighborhoods.items()
        ]
        hoods.sort(key=lambda n: (-n['count'], n['neighborhood']))
        clusters.append({
            'city': city,
            'total_friends': sum(n['count'] for n in hoods),
            'neighborhoods': hoods,
        })
    clusters.sort(key=lambda c: (-c['total_friends'], c['city']))
    return clusters[:limit]


def build_network(friends) -> dict:
    friends = list(friends)
    return {
        'levels': level_counts(friends),
        'introduction_chains': introduction_chains(friends),
        'location_clusters': location_clusters(friends),
    }


def name_game_round(friends, rng: random.Random | None = None) -> dict:
    """Pick a friend with a photo and offer their name among three decoys.

    Options are distinct names, so raises NotEnoughPhotos when fewer than
    four differently named friends have a photo.
    """
    rng = rng or random.Random()
    candidates = [f for f in friends if f.photo]
    names = sorted({f.full_name for f in candidates})
    if len(names) < NAME_GAME_OPTIONS:
        raise NotEnoughPhotos(f'Add photos to at least {NAME_GAME_OPTIONS} differently named friends to play')

    target = rng.choice(candidates)
    decoys = rng.sample([name for name in names if name != target.full_name], NAME_GAME_OPTIONS - 1)
    options = decoys + [target.full_name]
    rng.shuffle(options)
    return {
        'friend_id': target.id,
        'photo': target.photo,
        'options': options,
        'answer': target.full_name,
    }
