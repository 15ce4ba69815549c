FRIEND_CATEGORIES = {
    'close_friends': 'Close Friends',
    'friends': 'Friends',
    'work_friends': 'Work Friends',
    'new_friends': 'New Friends',
    'acquaintances': 'Acquaintances',
    'family': 'Family',
}

RELATIONSHIP_LEVELS = {
    'acquaintance': 'Acquaintance',
    'friend': 'Friend',
    'close': 'Close',
    'work': 'Work',
}

RELATIONSHIP_TYPES = {
    'introduced_by': 'Introduced by',
    'partner': 'Partner/Spouse',
    'friend_of': 'Friend of',
    'colleague': 'Colleague',
    'family': 'Family member',
}

ACTIVITY_TYPES = {
    'added': 'Added',
    'updated': 'Updated',
    'moved': 'Moved',
    'interacted': 'Interacted with',
    'imported': 'Imported',
    'shared': 'Received',
}

# activity types that count as a new connection on the dashboard
NEW_CONNECTION_TYPES = ('added', 'imported')
NEW_CONNECTION_WINDOW_DAYS = 30

INTERESTS = [
    "Art", "Music", "Sports", "Technology", "Travel", "Cooking", "Reading",
    "Gaming", "Photography", "Fitness", "Design", "Business", "Movies",
    "Fashion", "Nature", "Science", "History", "Politics", "Writing",
    "Dancing", "Yoga", "Hiking", "Cycling", "Swimming", "Running",
]

LIFESTYLE_OPTIONS = [
    "Active", "Relaxed", "Social", "Quiet", "Adventurous", "Homebody",
    "Workaholic", "Balanced", "Creative", "Analytical", "Spontaneous",
    "Organized", "Minimalist", "Maximalist",
]
