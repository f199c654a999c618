#!/usr/bin/env python3
"""
Seed test data for verifying dashboard features locally.

Creates:
  1. Categories with colors
  2. Leads spread across categories (plus a few uncategorized)
  3. Video metadata rows (no objects are uploaded)
  4. Sales lookups and a handful of sales records

Usage:
    python scripts/seed_test_data.py          # seed everything
    python scripts/seed_test_data.py --clear  # wipe seeded data first

Requires: DATABASE_URL set (or defaults to sqlite:///local.db).
"""
import sys
import os
import uuid
import argparse
from datetime import datetime, timezone, timedelta

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from leaddesk import create_app
from leaddesk.config import DEFAULT_PROFILE_IMAGE
from leaddesk.database import get_session, engine, Base
from leaddesk.models.category import Category
from leaddesk.models.lead import Lead
from leaddesk.models.video import Video
from leaddesk.models.sales import SalesRecord, ChatLocation, SaleStatus, LeadSource, Designer
from leaddesk.services.sales import compute_earnings


# ── Fixtures ─────────────────────────────────────────────────────────────────

CATEGORIES = [
    ('Travel', '#3B82F6'),
    ('Fitness', '#10B981'),
    ('Lifestyle', '#F59E0B'),
    ('Tech', '#8B5CF6'),
]

CREATORS = [
    {'handle': 'wanderlust_jane',   'name': 'Jane Morrison',    'followers': 82000,  'category': 'Travel'},
    {'handle': 'trail_blazer_mik',  'name': 'Mik Andersen',     'followers': 45000,  'category': 'Travel'},
    {'handle': 'nomad_sophie',      'name': 'Sophie Laurent',   'followers': 120000, 'category': 'Travel'},
    {'handle': 'liftwithpriya',     'name': 'Priya Sharma',     'followers': 67000,  'category': 'Fitness'},
    {'handle': 'hike_eat_repeat',   'name': 'Jonas Müller',     'followers': 41000,  'category': 'Fitness'},
    {'handle': 'sunsetseeker_',     'name': 'Aisha Mohammed',   'followers': 15000,  'category': 'Lifestyle'},
    {'handle': 'roamandrest',       'name': 'Emma Chen',        'followers': 22000,  'category': 'Lifestyle'},
    {'handle': 'devnotes_derek',    'name': 'Derek Williams',   'followers': 8000,   'category': 'Tech'},
    {'handle': 'coastal_vibes_co',  'name': 'Natalia Torres',   'followers': 95000,  'category': None},
    {'handle': 'passportpages',     'name': "Liam O'Brien",     'followers': 29000,  'category': None},
]

VIDEOS = [
    {'title': 'Welcome reel',       'filename': 'welcome.mp4',   'size': 4_200_000,  'category': 'Travel'},
    {'title': 'Gym walkthrough',    'filename': 'gym.mov',       'size': 12_800_000, 'category': 'Fitness'},
    {'title': 'Unboxing (draft)',   'filename': 'unboxing.webm', 'size': 7_100_000,  'category': None},
]

LOOKUP_VALUES = {
    ChatLocation: ['Instagram DM', 'Email', 'WhatsApp'],
    SaleStatus: ['Prospect', 'Negotiating', 'Closed Won', 'Closed Lost'],
    LeadSource: ['Referral', 'Cold Outreach', 'Inbound'],
    Designer: ['Ana', 'Ben', 'Chidi'],
}

SALES = [
    {'client': 'Jane Morrison', 'product': 'Brand kit', 'deal': 2500.0, 'payout': 900.0,
     'chat': 'Instagram DM', 'status': 'Closed Won', 'source': 'Referral', 'designer': 'Ana'},
    {'client': 'Coastal Vibes Co', 'product': 'Website', 'deal': 6000.0, 'payout': 2400.0,
     'chat': 'Email', 'status': 'Negotiating', 'source': 'Inbound', 'designer': 'Ben'},
    {'client': 'Derek Williams', 'product': None, 'deal': None, 'payout': None,
     'chat': 'WhatsApp', 'status': 'Prospect', 'source': 'Cold Outreach', 'designer': None},
]

# Seeded rows get deterministic ids so re-seeding and --clear find them again
SEED_NAMESPACE = uuid.UUID('6f0c1e52-0a8e-4d8e-9a57-3c3f3f0d5e11')


def seed_id(kind, key):
    return str(uuid.uuid5(SEED_NAMESPACE, f'{kind}:{key}'))


# ── Seeders ──────────────────────────────────────────────────────────────────

def seed_categories(session):
    for name, color in CATEGORIES:
        session.merge(Category(id=seed_id('category', name), name=name, color=color))
    print(f'  Categories: {len(CATEGORIES)}')


def seed_leads(session):
    now = datetime.now(timezone.utc)
    for i, c in enumerate(CREATORS):
        session.merge(Lead(
            id=seed_id('lead', c['handle']),
            name=c['name'],
            twitter_handle=c['handle'],
            profile_image_url=DEFAULT_PROFILE_IMAGE,
            follower_count=c['followers'],
            last_post_date=now - timedelta(days=i),
            is_verified=c['followers'] > 90000,
            is_blue_verified=i % 3 == 0,
            category_id=seed_id('category', c['category']) if c['category'] else None,
            created_at=now - timedelta(hours=i * 6),
            updated_at=now,
        ))
    print(f'  Leads:      {len(CREATORS)}')


def seed_videos(session):
    now = datetime.now(timezone.utc)
    for i, v in enumerate(VIDEOS):
        ext = v['filename'].rsplit('.', 1)[-1]
        mime = {'mp4': 'video/mp4', 'mov': 'video/quicktime', 'webm': 'video/webm'}[ext]
        session.merge(Video(
            id=seed_id('video', v['filename']),
            title=v['title'],
            filename=v['filename'],
            filepath=f"seed-{int((now - timedelta(days=i)).timestamp() * 1000)}-{i}.{ext}",
            filesize=v['size'],
            mime_type=mime,
            upload_status='completed',
            category_id=seed_id('category', v['category']) if v['category'] else None,
            created_at=now - timedelta(days=i),
        ))
    print(f'  Videos:     {len(VIDEOS)} (metadata only)')


def seed_sales(session):
    for model, names in LOOKUP_VALUES.items():
        for name in names:
            session.merge(model(id=seed_id(model.__tablename__, name), name=name))

    for s in SALES:
        session.merge(SalesRecord(
            id=seed_id('sale', s['client']),
            client=s['client'],
            product=s['product'],
            est_deal_value=s['deal'],
            est_payout=s['payout'],
            est_earnings=compute_earnings(s['deal'], s['payout']),
            chat_location_id=seed_id('chat_locations', s['chat']),
            sale_status_id=seed_id('sale_statuses', s['status']),
            lead_source_id=seed_id('lead_sources', s['source']),
            designer_id=seed_id('designers', s['designer']) if s['designer'] else None,
        ))
    print(f'  Sales:      {len(SALES)} records, {sum(len(v) for v in LOOKUP_VALUES.values())} lookups')


# ── Clear / Main ─────────────────────────────────────────────────────────────

def clear_seeded_data(session):
    """Remove every seeded row (children before parents)."""
    deleted = 0
    deleted += session.query(SalesRecord).filter(
        SalesRecord.id.in_([seed_id('sale', s['client']) for s in SALES])
    ).delete(synchronize_session=False)
    for model, names in LOOKUP_VALUES.items():
        deleted += session.query(model).filter(
            model.id.in_([seed_id(model.__tablename__, n) for n in names])
        ).delete(synchronize_session=False)
    deleted += session.query(Video).filter(
        Video.id.in_([seed_id('video', v['filename']) for v in VIDEOS])
    ).delete(synchronize_session=False)
    deleted += session.query(Lead).filter(
        Lead.id.in_([seed_id('lead', c['handle']) for c in CREATORS])
    ).delete(synchronize_session=False)
    deleted += session.query(Category).filter(
        Category.id.in_([seed_id('category', name) for name, _ in CATEGORIES])
    ).delete(synchronize_session=False)
    session.commit()

    if not deleted:
        print('No seeded data found.')
        return
    print(f'Cleared {deleted} seeded rows.')


def main():
    parser = argparse.ArgumentParser(description='Seed test data for local development')
    parser.add_argument('--clear', action='store_true', help='Clear seeded data before (or instead of) seeding')
    parser.add_argument('--clear-only', action='store_true', help='Only clear, do not re-seed')
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        # Ensure tables exist (for SQLite local dev)
        Base.metadata.create_all(engine)

        session = get_session()
        try:
            if args.clear or args.clear_only:
                clear_seeded_data(session)
                if args.clear_only:
                    return

            print('Seeding test data...')
            seed_categories(session)
            seed_leads(session)
            seed_videos(session)
            seed_sales(session)
            session.commit()
            print('\nDone! Visit http://localhost:8080/api/leads to verify.')

        except Exception as e:
            session.rollback()
            print(f'Error: {e}')
            raise
        finally:
            session.close()


if __name__ == '__main__':
    main()
