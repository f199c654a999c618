"""
User role routes. A missing row (or an unreadable one) means the default role.
"""
import logging
from flask import Blueprint, request, jsonify

from leaddesk.auth import current_user, require_admin
from leaddesk.config import DEFAULT_ROLE, ROLES
from leaddesk.database import get_session
from leaddesk.models.user_role import UserRole
from leaddesk.services.activity import log_activity

logger = logging.getLogger('routes.user_roles')

bp = Blueprint('user_roles', __name__)


@bp.route('/api/user_roles/<user_id>')
def get_role(user_id):
    default = {'role': {'user_id': user_id, 'role': DEFAULT_ROLE}}
    session = get_session()
    try:
        row = session.query(UserRole).filter_by(user_id=user_id).first()
        if row is None:
            return jsonify(default)
        return jsonify({'role': row.to_dict()})
    except Exception:
        logger.error("Error fetching role for %s, falling back to default", user_id, exc_info=True)
        return jsonify(default)
    finally:
        session.close()


@bp.route('/api/user_roles/<user_id>', methods=['PUT'])
@require_admin
def set_role(user_id):
    data = request.get_json(silent=True)
    role = data.get('role') if isinstance(data, dict) else None
    if role not in ROLES:
        return jsonify({'error': f"Role must be one of: {', '.join(ROLES)}"}), 400

    session = get_session()
    try:
        row = session.query(UserRole).filter_by(user_id=user_id).first()
        if row is None:
            row = UserRole(user_id=user_id, role=role)
            session.add(row)
        else:
            row.role = role
        session.commit()
        session.refresh(row)
        payload = row.to_dict()
    except Exception:
        session.rollback()
        logger.error("Error setting role for %s", user_id, exc_info=True)
        return jsonify({'error': 'Failed to update role'}), 500
    finally:
        session.close()

    log_activity(current_user(), 'update_user_role', 'user', user_id, {'role': role})
    return jsonify({'role': payload})
