"""
Lead routes: paginated listing, create (direct + mocked Twitter import),
category reassignment, delete, and the SSE change feed.

Every mutation is written to the activity log and published on the
realtime channel after it commits.
"""
import json
import logging
from flask import Blueprint, request, jsonify, Response, stream_with_context

from leaddesk.auth import current_user
from leaddesk.config import LEADS_PAGE_SIZE, MAX_PAGE_SIZE, REALTIME_KEEPALIVE_SECONDS
from leaddesk.database import get_session
from leaddesk.models.category import Category
from leaddesk.models.lead import Lead
from leaddesk.services import realtime
from leaddesk.services.activity import log_activity, parse_date
from leaddesk.services.twitter import extract_handle, build_mock_lead, profile_image_or_default

logger = logging.getLogger('routes.leads')

bp = Blueprint('leads', __name__)


def page_window(page, limit):
    """Clamp paging params and return (page, limit, start, end) with an inclusive end."""
    page = max(page, 0)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    start = page * limit
    return page, limit, start, start + limit - 1


@bp.route('/api/leads')
def list_leads():
    """Offset-paginated leads, newest first."""
    page, limit, start, end = page_window(
        request.args.get('page', 0, type=int),
        request.args.get('limit', LEADS_PAGE_SIZE, type=int),
    )

    session = get_session()
    try:
        total = session.query(Lead).count()
        leads = (
            session.query(Lead)
            .order_by(Lead.created_at.desc(), Lead.id.desc())
            .offset(start)
            .limit(limit)
            .all()
        )
        logger.debug("Leads page %d: range %d-%d, got %d of %d", page, start, end, len(leads), total)

        return jsonify({
            'leads': [lead.to_dict() for lead in leads],
            'pagination': {
                'page': page,
                'totalCount': total,
                'hasMore': start + len(leads) < total,
                'currentRange': {'start': start, 'end': end},
            },
        })
    except Exception:
        logger.error("Error fetching leads page %d", page, exc_info=True)
        return jsonify({'error': 'Failed to fetch leads'}), 500
    finally:
        session.close()


@bp.route('/api/leads', methods=['POST'])
def create_lead():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid request body'}), 400

    name = str(data.get('name') or '').strip()
    handle = extract_handle(str(data.get('twitter_handle') or ''))
    if not name or not handle:
        return jsonify({'error': 'Name and twitter_handle are required'}), 400

    try:
        follower_count = int(data.get('follower_count') or 0)
        last_post_date = parse_date(data.get('last_post_date'))
    except (TypeError, ValueError):
        return jsonify({'error': 'Invalid follower_count or last_post_date'}), 400

    session = get_session()
    try:
        category_id = data.get('category_id') or None
        if category_id and session.get(Category, category_id) is None:
            return jsonify({'error': 'Category not found'}), 400

        lead = Lead(
            name=name,
            twitter_handle=handle,
            profile_image_url=profile_image_or_default(data.get('profile_image_url')),
            follower_count=max(follower_count, 0),
            last_post_date=last_post_date,
            is_verified=bool(data.get('is_verified', False)),
            is_blue_verified=bool(data.get('is_blue_verified', False)),
            category_id=category_id,
        )
        session.add(lead)
        session.commit()
        payload = lead.to_dict()
    except Exception:
        session.rollback()
        logger.error("Error creating lead", exc_info=True)
        return jsonify({'error': 'Failed to create lead'}), 500
    finally:
        session.close()

    _after_insert(payload)
    return jsonify({'lead': payload}), 201


@bp.route('/api/leads/create-with-twitter', methods=['POST'])
def create_lead_with_twitter():
    """Mocked Twitter import: derive a placeholder lead from the profile URL."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    twitter_url = data.get('twitter_url')
    if not twitter_url:
        return jsonify({'error': 'Twitter URL is required'}), 400

    handle = extract_handle(str(twitter_url))
    if not handle:
        return jsonify({'error': 'Invalid Twitter URL'}), 400

    session = get_session()
    try:
        category_id = data.get('category_id') or None
        if category_id:
            if session.get(Category, category_id) is None:
                return jsonify({'error': 'Category not found'}), 400
        else:
            default = session.query(Category.id).order_by(Category.name.asc()).first()
            category_id = default.id if default else None

        lead = Lead(**build_mock_lead(handle, category_id=category_id))
        session.add(lead)
        session.commit()
        payload = lead.to_dict()
        logger.info("Created mock lead %s for @%s", payload['id'], handle)
    except Exception:
        session.rollback()
        logger.error("Error creating lead for @%s", handle, exc_info=True)
        return jsonify({'error': 'Failed to create lead'}), 500
    finally:
        session.close()

    _after_insert(payload)
    return jsonify({'lead': payload}), 201


@bp.route('/api/leads/<lead_id>', methods=['PATCH'])
def update_lead(lead_id):
    """Reassign (or clear) a lead's category."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or 'category_id' not in data:
        return jsonify({'error': 'Invalid request body'}), 400

    category_id = data.get('category_id') or None

    session = get_session()
    try:
        if category_id and session.get(Category, category_id) is None:
            return jsonify({'error': 'Category not found'}), 400

        lead = session.get(Lead, lead_id)
        if lead is None:
            return jsonify({'error': 'Lead not found'}), 404

        old = lead.to_dict(with_category=False)
        lead.category_id = category_id
        session.commit()
        session.refresh(lead)
        payload = lead.to_dict()
    except Exception:
        session.rollback()
        logger.error("Error updating lead %s", lead_id, exc_info=True)
        return jsonify({'error': 'Failed to update lead'}), 500
    finally:
        session.close()

    log_activity(current_user(), 'update_lead', 'lead', lead_id, {'updates': {'category_id': category_id}})
    realtime.publish_change('leads', 'UPDATE', new=_without_category(payload), old=old)
    return jsonify({'lead': payload})


@bp.route('/api/leads/<lead_id>', methods=['DELETE'])
def delete_lead(lead_id):
    session = get_session()
    try:
        lead = session.get(Lead, lead_id)
        if lead is None:
            return jsonify({'error': 'Lead not found'}), 404
        old = lead.to_dict(with_category=False)
        session.delete(lead)
        session.commit()
    except Exception:
        session.rollback()
        logger.error("Error deleting lead %s", lead_id, exc_info=True)
        return jsonify({'error': 'Failed to delete lead'}), 500
    finally:
        session.close()

    log_activity(current_user(), 'delete_lead', 'lead', lead_id, {'lead_name': old['name']})
    realtime.publish_change('leads', 'DELETE', old=old)
    return jsonify({'success': True})


@bp.route('/api/leads/stream')
def stream_leads():
    """SSE stream: relays lead INSERT/UPDATE/DELETE events as they are published."""
    def generate():
        events = realtime.listen('leads', idle_ticks=REALTIME_KEEPALIVE_SECONDS)
        try:
            yield ": connected\n\n"
            for event in events:
                if event is None:
                    yield ": keepalive\n\n"
                    continue
                yield f"data: {json.dumps(event)}\n\n"
        finally:
            events.close()

    return Response(
        stream_with_context(generate()),
        mimetype='text/event-stream',
        headers={'Cache-Control': 'no-cache', 'X-Accel-Buffering': 'no'},
    )


# ── Private helpers ──────────────────────────────────────────────────────────

def _without_category(lead_dict):
    return {k: v for k, v in lead_dict.items() if k != 'category'}


def _after_insert(payload):
    log_activity(current_user(), 'create_lead', 'lead', payload['id'], {
        'twitter_handle': payload['twitter_handle'],
        'category_id': payload['category_id'],
    })
    realtime.publish_change('leads', 'INSERT', new=_without_category(payload))
