"""
Fake lead generator for demos and load testing.
"""
import logging
import random
from datetime import datetime, timedelta, timezone

from leaddesk.config import DEFAULT_PROFILE_IMAGE, GENERATE_TOTAL_LEADS, GENERATE_BATCH_SIZE
from leaddesk.models.category import Category
from leaddesk.models.lead import Lead

logger = logging.getLogger('services.generator')

FIRST_NAMES = [
    'Ava', 'Liam', 'Mia', 'Noah', 'Zoe', 'Ethan', 'Lena', 'Omar', 'Priya', 'Mateo',
    'Chloe', 'Kenji', 'Sara', 'Jonas', 'Amara', 'Luca', 'Nina', 'Diego', 'Ines', 'Felix',
]
LAST_NAMES = [
    'Morrison', 'Andersen', 'Laurent', 'Reyes', 'Sharma', "O'Brien", 'Johansson', 'Chen',
    'Williams', 'Torres', 'Müller', 'Nakamura', 'Okafor', 'Rossi', 'Haddad', 'Kowalski',
]


class NoCategoriesError(RuntimeError):
    pass


def _handle(first, last, rng):
    base = f"{first}{last}".lower().replace("'", '').replace('ü', 'u')
    return f"{base}{rng.randint(1, 9999)}"[:15]


def fake_lead(category_ids, rng=random, now=None):
    now = now or datetime.now(timezone.utc)
    first = rng.choice(FIRST_NAMES)
    last = rng.choice(LAST_NAMES)
    return Lead(
        name=f'{first} {last}',
        twitter_handle=_handle(first, last, rng),
        profile_image_url=DEFAULT_PROFILE_IMAGE,
        follower_count=rng.randint(100, 1_000_000),
        last_post_date=now - timedelta(seconds=rng.randint(0, 30 * 86400)),
        category_id=rng.choice(category_ids),
        is_verified=rng.random() < 0.1,
        is_blue_verified=rng.random() < 0.2,
        created_at=now - timedelta(seconds=rng.randint(0, 90 * 86400)),
        updated_at=now,
    )


def generate_leads(session, total=GENERATE_TOTAL_LEADS, batch_size=GENERATE_BATCH_SIZE, rng=random):
    """Insert `total` fake leads in batches, committing each batch. Returns the inserted leads as dicts."""
    category_ids = [row.id for row in session.query(Category.id).all()]
    if not category_ids:
        raise NoCategoriesError('Error fetching categories or no categories found')

    created = []
    for start in range(0, total, batch_size):
        size = min(batch_size, total - start)
        batch = [fake_lead(category_ids, rng=rng) for _ in range(size)]
        session.add_all(batch)
        session.commit()
        created.extend(lead.to_dict(with_category=False) for lead in batch)
        logger.info("Generated batch of %d leads (%d/%d)", size, len(created), total)
    return created
