"""
User activity logging: append-only audit trail helpers.

log_activity() opens its own session and never raises: a failed audit write is
logged and reported as False, it must not fail the request that triggered it.
"""
import logging
import math
from datetime import datetime, timezone

from flask import has_request_context, request
from sqlalchemy import func

from leaddesk.database import get_session
from leaddesk.models.activity_log import UserActivityLog

logger = logging.getLogger('services.activity')


def log_activity(user, action, object_type=None, object_id=None, metadata=None):
    """Append one activity row for `user`. Returns True on success."""
    if user is None:
        logger.error("Cannot log activity %s: no authenticated user", action)
        return False

    ip_address = ''
    user_agent = ''
    if has_request_context():
        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr or '').split(',')[0].strip()
        user_agent = request.headers.get('User-Agent', '')

    session = get_session()
    try:
        session.add(UserActivityLog(
            user_id=user.id,
            action=action,
            object_type=object_type,
            object_id=str(object_id) if object_id is not None else None,
            extra=metadata or {},
            ip_address=ip_address,
            user_agent=user_agent,
        ))
        session.commit()
        return True
    except Exception:
        session.rollback()
        logger.error("Failed to log activity %s on %s %s", action, object_type, object_id, exc_info=True)
        return False
    finally:
        session.close()


def parse_date(value):
    """ISO-8601 date/datetime string → naive UTC datetime. Raises ValueError."""
    if not value:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Expected an ISO-8601 string, got {type(value).__name__}")
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo:
        return parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def list_activity_logs(session, page=1, limit=20, action=None, object_type=None,
                       from_date=None, to_date=None):
    """
    Filtered, paginated activity logs, newest first.

    Filters combine with AND; the date range is inclusive on both ends.
    totalCount reflects the filters, not the whole table.
    """
    page = max(page, 1)
    limit = max(limit, 1)

    query = session.query(UserActivityLog)
    if action:
        query = query.filter(UserActivityLog.action == action)
    if object_type:
        query = query.filter(UserActivityLog.object_type == object_type)
    if from_date:
        query = query.filter(UserActivityLog.created_at >= from_date)
    if to_date:
        query = query.filter(UserActivityLog.created_at <= to_date)

    total = query.with_entities(func.count(UserActivityLog.id)).scalar() or 0
    rows = (
        query.order_by(UserActivityLog.created_at.desc(), UserActivityLog.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return {
        'logs': [row.to_dict() for row in rows],
        'totalCount': total,
        'currentPage': page,
        'totalPages': math.ceil(total / limit) if total else 0,
    }
