"""Tests for /api/sales: the inline-editable sales grid."""
import pytest

from leaddesk.models.sales import SalesRecord, ChatLocation, SaleStatus, Designer


@pytest.fixture
def lookups(db_session):
    rows = {
        'chat': ChatLocation(name='Email'),
        'status': SaleStatus(name='Negotiating'),
        'designer': Designer(name='Ana'),
    }
    db_session.add_all(rows.values())
    db_session.commit()
    return rows


class TestListSales:

    def test_records_and_lookups(self, client, auth_headers, db_session, lookups):
        db_session.add(SalesRecord(client='Acme', chat_location_id=lookups['chat'].id,
                                   est_deal_value=100.0, est_payout=40.0, est_earnings=60.0))
        db_session.commit()

        data = client.get('/api/sales', headers=auth_headers).get_json()

        [record] = data['records']
        assert record['client'] == 'Acme'
        assert record['chat_location'] == {'id': lookups['chat'].id, 'name': 'Email'}
        assert record['designer'] is None
        assert data['lookups']['sale_statuses'] == [{'id': lookups['status'].id, 'name': 'Negotiating'}]
        assert data['lookups']['lead_sources'] == []


class TestCreateSale:

    def test_blank_record(self, client, auth_headers):
        resp = client.post('/api/sales', json={}, headers=auth_headers)
        assert resp.status_code == 201
        record = resp.get_json()['record']
        assert record['client'] == ''
        assert record['est_earnings'] is None

    def test_computes_earnings(self, client, auth_headers, lookups):
        resp = client.post('/api/sales', headers=auth_headers, json={
            'client': 'Acme', 'est_deal_value': '$1,250.50', 'est_payout': 250,
            'designer_id': lookups['designer'].id,
        })
        record = resp.get_json()['record']
        assert record['est_deal_value'] == 1250.5
        assert record['est_earnings'] == 1000.5
        assert record['designer']['name'] == 'Ana'


class TestUpdateSale:

    @pytest.fixture
    def record(self, db_session):
        rec = SalesRecord(client='Acme', est_deal_value=500.0, est_payout=100.0, est_earnings=400.0)
        db_session.add(rec)
        db_session.commit()
        return rec

    def test_payout_change_recomputes_earnings(self, client, auth_headers, record):
        resp = client.patch(f'/api/sales/{record.id}', json={'est_payout': 150}, headers=auth_headers)
        assert resp.status_code == 200
        assert resp.get_json()['record']['est_earnings'] == 350.0

    def test_clearing_deal_clears_earnings(self, client, auth_headers, record):
        resp = client.patch(f'/api/sales/{record.id}', json={'est_deal_value': ''}, headers=auth_headers)
        assert resp.get_json()['record']['est_earnings'] is None

    def test_non_numeric_money_400(self, client, auth_headers, record):
        resp = client.patch(f'/api/sales/{record.id}', json={'est_payout': 'lots'}, headers=auth_headers)
        assert resp.status_code == 400

    def test_unknown_lookup_400(self, client, auth_headers, record):
        resp = client.patch(f'/api/sales/{record.id}', json={'sale_status_id': 'nope'}, headers=auth_headers)
        assert resp.status_code == 400

    def test_unknown_record_404(self, client, auth_headers):
        assert client.patch('/api/sales/nope', json={'client': 'x'}, headers=auth_headers).status_code == 404

    def test_delete(self, client, auth_headers, record, db_session):
        assert client.delete(f'/api/sales/{record.id}', headers=auth_headers).get_json() == {'success': True}
        assert db_session.query(SalesRecord).count() == 0
        assert client.delete(f'/api/sales/{record.id}', headers=auth_headers).status_code == 404
