"""Tests for the fake lead generator."""
import random
from datetime import datetime, timedelta, timezone

import pytest

from leaddesk.models.category import Category
from leaddesk.models.lead import Lead
from leaddesk.services.generator import NoCategoriesError, fake_lead, generate_leads


class TestFakeLead:

    def test_value_ranges(self):
        now = datetime(2026, 3, 1, tzinfo=timezone.utc)
        rng = random.Random(1)
        for _ in range(200):
            lead = fake_lead(['c-1', 'c-2'], rng=rng, now=now)
            assert 100 <= lead.follower_count <= 1_000_000
            assert lead.category_id in ('c-1', 'c-2')
            assert now - timedelta(days=90) <= lead.created_at <= now
            assert len(lead.twitter_handle) <= 15

    def test_verified_share_roughly_ten_percent(self):
        rng = random.Random(3)
        leads = [fake_lead(['c'], rng=rng) for _ in range(2000)]
        share = sum(lead.is_verified for lead in leads) / len(leads)
        assert 0.06 < share < 0.14


class TestGenerateLeads:

    def test_batches_commit(self, db_session):
        db_session.add(Category(name='Travel', color='#3B82F6'))
        db_session.commit()

        created = generate_leads(db_session, total=7, batch_size=3, rng=random.Random(0))

        assert len(created) == 7
        assert db_session.query(Lead).count() == 7
        assert {lead['id'] for lead in created} == {row.id for row in db_session.query(Lead.id)}
        assert 'category' not in created[0]

    def test_requires_categories(self, db_session):
        with pytest.raises(NoCategoriesError):
            generate_leads(db_session, total=5)
