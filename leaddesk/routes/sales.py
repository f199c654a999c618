"""
Sales grid routes: records with their lookup tables, inline edits.
"""
import logging
from flask import Blueprint, request, jsonify

from leaddesk.auth import current_user
from leaddesk.database import get_session
from leaddesk.models.sales import SalesRecord
from leaddesk.services.activity import log_activity
from leaddesk.services.sales import (
    SalesValidationError, apply_changes, list_records, load_lookups,
)

logger = logging.getLogger('routes.sales')

bp = Blueprint('sales', __name__)


@bp.route('/api/sales')
def list_sales():
    session = get_session()
    try:
        return jsonify({
            'records': [rec.to_dict() for rec in list_records(session)],
            'lookups': load_lookups(session),
        })
    except Exception:
        logger.error("Error fetching sales records", exc_info=True)
        return jsonify({'error': 'Failed to fetch sales records'}), 500
    finally:
        session.close()


@bp.route('/api/sales', methods=['POST'])
def create_sale():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    session = get_session()
    try:
        record = SalesRecord(client='')
        apply_changes(session, record, data)
        session.add(record)
        session.commit()
        session.refresh(record)
        payload = record.to_dict()
    except SalesValidationError as e:
        session.rollback()
        return jsonify({'error': str(e)}), 400
    except Exception:
        session.rollback()
        logger.error("Error creating sales record", exc_info=True)
        return jsonify({'error': 'Failed to create sales record'}), 500
    finally:
        session.close()

    log_activity(current_user(), 'create_sale', 'sales_record', payload['id'])
    return jsonify({'record': payload}), 201


@bp.route('/api/sales/<record_id>', methods=['PATCH'])
def update_sale(record_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid request body'}), 400

    session = get_session()
    try:
        record = session.get(SalesRecord, record_id)
        if record is None:
            return jsonify({'error': 'Sales record not found'}), 404
        apply_changes(session, record, data)
        session.commit()
        session.refresh(record)
        payload = record.to_dict()
    except SalesValidationError as e:
        session.rollback()
        return jsonify({'error': str(e)}), 400
    except Exception:
        session.rollback()
        logger.error("Error updating sales record %s", record_id, exc_info=True)
        return jsonify({'error': 'Failed to update sales record'}), 500
    finally:
        session.close()

    log_activity(current_user(), 'update_sale', 'sales_record', record_id, {'fields': sorted(data)})
    return jsonify({'record': payload})


@bp.route('/api/sales/<record_id>', methods=['DELETE'])
def delete_sale(record_id):
    session = get_session()
    try:
        record = session.get(SalesRecord, record_id)
        if record is None:
            return jsonify({'error': 'Sales record not found'}), 404
        session.delete(record)
        session.commit()
    except Exception:
        session.rollback()
        logger.error("Error deleting sales record %s", record_id, exc_info=True)
        return jsonify({'error': 'Failed to delete sales record'}), 500
    finally:
        session.close()

    log_activity(current_user(), 'delete_sale', 'sales_record', record_id)
    return jsonify({'success': True})
