"""Tests for POST /api/generate-data."""
import json

from leaddesk.models.lead import Lead


class TestGenerateData:

    def test_inserts_ten_leads(self, client, auth_headers, make_category, db_session):
        category = make_category()
        resp = client.post('/api/generate-data', headers=auth_headers)

        assert resp.status_code == 200
        assert resp.get_json() == {'success': True, 'message': 'Successfully inserted 10 leads'}
        leads = db_session.query(Lead).all()
        assert len(leads) == 10
        assert {lead.category_id for lead in leads} == {category.id}

    def test_publishes_insert_per_lead(self, client, auth_headers, make_category, db_session, mock_redis):
        make_category()
        client.post('/api/generate-data', headers=auth_headers)

        events = [json.loads(c.args[1]) for c in mock_redis.publish.call_args_list]
        assert len(events) == 10
        assert {e['eventType'] for e in events} == {'INSERT'}
        assert {e['new']['id'] for e in events} == {row.id for row in db_session.query(Lead.id)}

    def test_no_categories_500(self, client, auth_headers, db_session, mock_redis):
        resp = client.post('/api/generate-data', headers=auth_headers)
        assert resp.status_code == 500
        assert resp.get_json()['success'] is False
        assert db_session.query(Lead).count() == 0
        mock_redis.publish.assert_not_called()

    def test_admin_only(self, client, user_headers, make_category):
        make_category()
        assert client.post('/api/generate-data', headers=user_headers).status_code == 403
