"""
Sample data for a fresh account

Usage: python -m kinship.seed <email>
"""

import asyncio
import sys
import logging
from .crud import get_user_by_email, list_friends, create_friend, create_relationship, record_interaction, update_friend

logger = logging.getLogger(__name__)

SAMPLE_FRIENDS = [
    {
        'first_name': 'Sarah', 'last_name': 'Chen', 'location': 'San Francisco, CA', 'neighborhood': 'Mission District',
        'category': 'close_friends', 'relationship_level': 'close',
        'interests': ['Photography', 'Hiking', 'Coffee'], 'lifestyle': 'Active', 'partner': 'Mark',
        'notes': 'Met at college, amazing photographer.',
        'contact_info': {'phone': '+1-415-555-0123', 'email': 'sarah.chen@example.com'},
        'how_we_met': 'College roommates',
    },
    {
        'first_name': 'Marcus', 'last_name': 'Johnson', 'location': 'New York, NY',
        'category': 'work_friends', 'relationship_level': 'work',
        'interests': ['Technology', 'Gaming', 'Basketball'], 'lifestyle': 'Workaholic',
        'notes': 'Software engineer. Great at debugging complex problems.',
        'contact_info': {'phone': '+1-212-555-0456', 'email': 'marcus.j@example.com'},
        'how_we_met': 'Started working together in 2022',
    },
    {
        'first_name': 'Emily', 'last_name': 'Rodriguez', 'location': 'Los Angeles, CA',
        'category': 'close_friends', 'relationship_level': 'close',
        'interests': ['Art', 'Music', 'Travel'], 'lifestyle': 'Creative', 'has_kids': True, 'partner': 'David',
        'notes': 'Childhood friend, now a successful artist. Two kids, Emma and Alex.',
        'contact_info': {'phone': '+1-323-555-0789', 'email': 'emily.r@example.com'},
        'how_we_met': 'Childhood friends',
    },
    {
        'first_name': 'Alex', 'last_name': 'Thompson', 'location': 'Seattle, WA',
        'category': 'friends', 'relationship_level': 'friend',
        'interests': ['Cycling', 'Reading', 'Cooking'], 'lifestyle': 'Balanced', 'partner': 'Jamie',
        'notes': 'Works in tech, amazing cook.',
        'contact_info': {'phone': '+1-206-555-0321', 'email': 'alex.t@example.com'},
        'how_we_met': 'Introduced by Sarah',
    },
    {
        'first_name': 'Lisa', 'last_name': 'Wang', 'location': 'Boston, MA',
        'category': 'work_friends', 'relationship_level': 'work',
        'interests': ['Finance', 'Yoga', 'Wine'], 'lifestyle': 'Professional',
        'notes': 'Investment banker, surprisingly zen.',
        'contact_info': {'phone': '+1-617-555-0654', 'email': 'lisa.w@example.com'},
        'how_we_met': 'Previous company colleague',
    },
    {
        'first_name': 'David', 'last_name': 'Miller', 'location': 'Austin, TX',
        'category': 'friends', 'relationship_level': 'friend',
        'interests': ['Music', 'BBQ', 'Startups'], 'lifestyle': 'Entrepreneurial', 'has_kids': True, 'partner': 'Jessica',
        'notes': 'Serial entrepreneur, amazing BBQ skills.',
        'contact_info': {'phone': '+1-512-555-0987', 'email': 'david.m@example.com'},
        'how_we_met': 'Startup meetup in 2020',
    },
    {
        'first_name': 'Rachel', 'last_name': 'Kim', 'location': 'Portland, OR',
        'category': 'new_friends', 'relationship_level': 'acquaintance',
        'interests': ['Design', 'Coffee', 'Sustainability'], 'lifestyle': 'Eco-conscious',
        'notes': 'UX designer, environmental activist.',
        'contact_info': {'phone': '+1-503-555-0234', 'email': 'rachel.k@example.com'},
        'how_we_met': 'Design conference',
    },
    {
        'first_name': 'Nina', 'last_name': 'Patel', 'location': 'San Francisco, CA', 'neighborhood': 'Noe Valley',
        'category': 'close_friends', 'relationship_level': 'close',
        'interests': ['Meditation', 'Cooking', 'Gardening'], 'lifestyle': 'Mindful', 'partner': 'Raj',
        'notes': 'Meditation teacher who grows her own vegetables.',
        'contact_info': {'phone': '+1-415-555-0890', 'email': 'nina.p@example.com'},
        'how_we_met': 'Meditation retreat in 2019',
    },
]

async def seed_user(email: str) -> int:
    """Create sample friends for an existing user; returns how many were created"""
    user = await get_user_by_email(email)
    if not user:
        raise ValueError(f"No user registered with {email}")
    if await list_friends(user.id):
        logger.info(f"User {user.id} already has friends, skipping seed")
        return 0

    created = [await create_friend(user.id, dict(data)) for data in SAMPLE_FRIENDS]
    by_name = {f.first_name: f for f in created}

    sarah, alex = by_name['Sarah'], by_name['Alex']
    await update_friend(user.id, alex.id, {'introduced_by': sarah.id})
    await create_relationship(user.id, alex.id, sarah.id, 'introduced_by')
    await record_interaction(user.id, by_name['Marcus'].id, 'Had coffee')

    logger.info(f"Seeded {len(created)} friends for user {user.id}")
    return len(created)

def main(argv=None):
    argv = argv if argv is not None else sys.argv[1:]
    if len(argv) != 1:
        print("usage: python -m kinship.seed <email>", file=sys.stderr)
        return 2
    logging.basicConfig(level=logging.INFO)
    try:
        count = asyncio.run(seed_user(argv[0]))
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1
    print(f"Created {count} friends")
    return 0

if __name__ == "__main__":
    sys.exit(main())
