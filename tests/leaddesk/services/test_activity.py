"""Tests for activity log helpers."""
from datetime import datetime
from unittest.mock import patch

import pytest

from leaddesk.auth import CurrentUser
from leaddesk.models.activity_log import UserActivityLog
from leaddesk.services.activity import log_activity, list_activity_logs, parse_date


class TestParseDate:

    def test_empty_is_none(self):
        assert parse_date('') is None
        assert parse_date(None) is None

    def test_zulu_normalized_to_naive(self):
        assert parse_date('2026-01-02T03:04:05Z') == datetime(2026, 1, 2, 3, 4, 5)

    def test_date_only(self):
        assert parse_date('2026-01-02') == datetime(2026, 1, 2)

    def test_offset_converted_to_utc(self):
        assert parse_date('2024-01-01T10:00:00+05:00') == datetime(2024, 1, 1, 5, 0)

    def test_non_string_raises_value_error(self):
        with pytest.raises(ValueError):
            parse_date(12345)

    def test_garbage_raises(self):
        with pytest.raises(ValueError):
            parse_date('soon')


class TestLogActivity:

    def test_writes_row_outside_request(self, db_session):
        assert log_activity(CurrentUser(id='u-1'), 'create_lead', 'lead', 42, {'a': 1}) is True
        row = db_session.query(UserActivityLog).one()
        assert row.object_id == '42'
        assert row.ip_address == ''
        assert row.extra == {'a': 1}

    def test_no_user_is_rejected(self, db_session):
        assert log_activity(None, 'create_lead') is False
        assert db_session.query(UserActivityLog).count() == 0

    def test_db_failure_returns_false(self):
        with patch('leaddesk.services.activity.get_session') as get_session:
            get_session.return_value.commit.side_effect = RuntimeError('db down')
            assert log_activity(CurrentUser(id='u-1'), 'create_lead') is False
            get_session.return_value.rollback.assert_called_once()


class TestListActivityLogs:

    def test_total_counts_filtered_rows(self, db_session):
        for i, action in enumerate(['a', 'b', 'a']):
            db_session.add(UserActivityLog(user_id='u', action=action, created_at=datetime(2026, 1, i + 1)))
        db_session.commit()

        result = list_activity_logs(db_session, page=1, limit=1, action='a')

        assert result['totalCount'] == 2
        assert result['totalPages'] == 2
        assert result['logs'][0]['created_at'].startswith('2026-01-03')

    def test_empty(self, db_session):
        assert list_activity_logs(db_session) == {
            'logs': [], 'totalCount': 0, 'currentPage': 1, 'totalPages': 0,
        }

    def test_page_below_one_clamped(self, db_session):
        assert list_activity_logs(db_session, page=-4)['currentPage'] == 1
