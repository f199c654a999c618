"""
Mocked Twitter/X import.

There is no scraping integration: a lead is built from the handle in the
profile URL with placeholder profile data.
"""
import random
from datetime import datetime, timezone

from leaddesk.config import DEFAULT_PROFILE_IMAGE


def extract_handle(twitter_url):
    """
    Pull the username out of a twitter.com / x.com profile URL.

    Takes the last path segment, strips a leading '@' and any query string.
    Returns '' when nothing usable is left.
    """
    if not twitter_url:
        return ''
    segment = twitter_url.strip().rstrip('/').split('/')[-1]
    segment = segment.split('?')[0].split('#')[0]
    return segment.replace('@', '').strip()


def profile_image_or_default(url):
    if not url or not str(url).strip():
        return DEFAULT_PROFILE_IMAGE
    return url


def build_mock_lead(handle, category_id=None, rng=random):
    """Lead column values for a mocked import of `handle`."""
    return {
        'name': f'Mock User ({handle})',
        'twitter_handle': handle,
        'profile_image_url': DEFAULT_PROFILE_IMAGE,
        'follower_count': rng.randrange(0, 1_000_000),
        'last_post_date': datetime.now(timezone.utc),
        'category_id': category_id,
        'is_verified': False,
        'is_blue_verified': False,
    }
