"""
Activity log routes: filtered audit trail listing and client-side event logging.
"""
import logging
from flask import Blueprint, request, jsonify

from leaddesk.auth import current_user, require_user
from leaddesk.config import ACTIVITY_PAGE_SIZE
from leaddesk.database import get_session
from leaddesk.services.activity import log_activity, list_activity_logs, parse_date

logger = logging.getLogger('routes.activity_logs')

bp = Blueprint('activity_logs', __name__)


@bp.route('/api/user-logs')
@require_user
def get_logs():
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', ACTIVITY_PAGE_SIZE, type=int)

    try:
        from_date = parse_date(request.args.get('fromDate'))
        to_date = parse_date(request.args.get('toDate'))
    except ValueError:
        return jsonify({'error': 'Invalid date filter'}), 400

    session = get_session()
    try:
        return jsonify(list_activity_logs(
            session,
            page=page,
            limit=limit,
            action=request.args.get('action') or None,
            object_type=request.args.get('objectType') or None,
            from_date=from_date,
            to_date=to_date,
        ))
    except Exception:
        logger.error("Error fetching activity logs", exc_info=True)
        return jsonify({'error': 'Failed to fetch logs'}), 500
    finally:
        session.close()


@bp.route('/api/user-logs', methods=['POST'])
@require_user
def create_log():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    action = data.get('action')
    if not action:
        return jsonify({'error': 'Action is required'}), 400

    metadata = data.get('metadata')
    ok = log_activity(
        current_user(),
        str(action),
        object_type=data.get('objectType'),
        object_id=data.get('objectId'),
        metadata=metadata if isinstance(metadata, dict) else {},
    )
    if not ok:
        return jsonify({'error': 'Failed to log activity'}), 500
    return jsonify({'success': True}), 201
