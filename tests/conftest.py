"""Shared test fixtures."""
import os

# Must be set before leaddesk.config is imported
os.environ.setdefault('JWT_SECRET', 'test-secret')
os.environ.setdefault('DATABASE_URL', 'sqlite://')

import pytest
from datetime import datetime, timedelta
from unittest.mock import patch, MagicMock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import leaddesk.database
from leaddesk.auth import CurrentUser, issue_token
from leaddesk.database import Base


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with schema created, shared across sessions."""
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    import leaddesk.models.category
    import leaddesk.models.lead
    import leaddesk.models.video
    import leaddesk.models.activity_log
    import leaddesk.models.user_role
    import leaddesk.models.mfa_factor
    import leaddesk.models.sales
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(autouse=True)
def patch_session_factory(db_engine):
    """Point every get_session() call at the in-memory engine."""
    factory = sessionmaker(bind=db_engine, expire_on_commit=False)
    with patch.object(leaddesk.database, 'SessionLocal', factory):
        yield factory


@pytest.fixture
def db_session(patch_session_factory):
    """Session for seeding and assertions. Call expire_all() before re-reading."""
    session = patch_session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(autouse=True)
def mock_redis():
    """Mock Redis client shared by the realtime feed and MFA challenges."""
    mock = MagicMock()
    mock.get.return_value = None
    mock.setex.return_value = True
    mock.publish.return_value = 1
    with patch('leaddesk.services.realtime.r', mock), patch('leaddesk.services.mfa.r', mock):
        yield mock


@pytest.fixture(autouse=True)
def mock_storage():
    """Mock boto3 S3 client. The videos bucket exists by default."""
    mock = MagicMock()
    mock.list_buckets.return_value = {'Buckets': [{'Name': 'videos'}]}
    with patch('leaddesk.services.storage.storage_client', mock):
        yield mock


@pytest.fixture
def app():
    """Flask test app."""
    from leaddesk import create_app
    app = create_app()
    app.config['TESTING'] = True
    yield app


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as c:
        yield c


# ── Auth helpers ─────────────────────────────────────────────────────────────

@pytest.fixture
def admin_user():
    return CurrentUser(id='11111111-1111-1111-1111-111111111111', email='admin@example.com', role='admin')


@pytest.fixture
def regular_user():
    return CurrentUser(id='22222222-2222-2222-2222-222222222222', email='user@example.com', role='user')


@pytest.fixture
def make_headers():
    def _make(user, aal=None):
        return {'Authorization': f'Bearer {issue_token(user, aal=aal)}'}
    return _make


@pytest.fixture
def auth_headers(make_headers, admin_user):
    """Bearer headers for an admin user."""
    return make_headers(admin_user)


@pytest.fixture
def user_headers(make_headers, regular_user):
    """Bearer headers for a non-admin user."""
    return make_headers(regular_user)


# ── Data factories ───────────────────────────────────────────────────────────

@pytest.fixture
def make_category(db_session):
    """Factory fixture: inserts and commits a Category."""
    from leaddesk.models.category import Category

    def _make(name='Travel', color='#3B82F6', **overrides):
        category = Category(name=name, color=color, **overrides)
        db_session.add(category)
        db_session.commit()
        return category
    return _make


@pytest.fixture
def make_lead(db_session):
    """Factory fixture: inserts and commits a Lead. `age` orders leads (older = larger)."""
    from leaddesk.models.lead import Lead
    base = datetime(2026, 1, 15, 12, 0, 0)

    def _make(handle='creator_one', age=0, **overrides):
        fields = dict(
            name=f'Creator {handle}',
            twitter_handle=handle,
            profile_image_url='https://example.com/avatar.png',
            follower_count=1000,
            created_at=base - timedelta(minutes=age),
            updated_at=base - timedelta(minutes=age),
        )
        fields.update(overrides)
        lead = Lead(**fields)
        db_session.add(lead)
        db_session.commit()
        return lead
    return _make
