"""
Category routes: list, create, rename/recolor, delete.

Deleting a category detaches it from every lead and video first, in the same
transaction.
"""
import logging
import re
from flask import Blueprint, request, jsonify

from leaddesk.auth import current_user
from leaddesk.database import get_session
from leaddesk.models.category import Category
from leaddesk.models.lead import Lead
from leaddesk.models.video import Video
from leaddesk.services import realtime
from leaddesk.services.activity import log_activity

logger = logging.getLogger('routes.categories')

bp = Blueprint('categories', __name__)

COLOR_RE = re.compile(r'^#[0-9A-Fa-f]{6}$')
MAX_NAME_LENGTH = 50


def _validate(name, color):
    """Return an error message, or None if the pair is acceptable."""
    if name is not None and len(name) > MAX_NAME_LENGTH:
        return f'Name must be at most {MAX_NAME_LENGTH} characters'
    if color is not None and not COLOR_RE.match(color):
        return 'Color must be a hex value like #1A2B3C'
    return None


@bp.route('/api/categories')
def list_categories():
    session = get_session()
    try:
        categories = session.query(Category).order_by(Category.name.asc()).all()
        return jsonify({'categories': [c.to_dict() for c in categories]})
    except Exception:
        logger.error("Error fetching categories", exc_info=True)
        return jsonify({'error': 'Failed to fetch categories'}), 500
    finally:
        session.close()


@bp.route('/api/categories', methods=['POST'])
def create_category():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    name = str(data.get('name') or '').strip()
    color = str(data.get('color') or '').strip()

    if not name or not color:
        return jsonify({'error': 'Name and color are required'}), 400
    error = _validate(name, color)
    if error:
        return jsonify({'error': error}), 400

    session = get_session()
    try:
        category = Category(name=name, color=color)
        session.add(category)
        session.commit()
        payload = category.to_dict()
    except Exception:
        session.rollback()
        logger.error("Error creating category", exc_info=True)
        return jsonify({'error': 'Failed to create category'}), 500
    finally:
        session.close()

    log_activity(current_user(), 'create_category', 'category', payload['id'], {'name': name, 'color': color})
    return jsonify({'category': payload}), 201


@bp.route('/api/categories/<category_id>', methods=['PATCH'])
def update_category(category_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid request body'}), 400

    name = data['name'].strip() if isinstance(data.get('name'), str) else None
    color = data['color'].strip() if isinstance(data.get('color'), str) else None
    if name is None and color is None:
        return jsonify({'error': 'No valid fields to update'}), 400
    if name == '' or color == '':
        return jsonify({'error': 'Name and color cannot be empty'}), 400
    error = _validate(name, color)
    if error:
        return jsonify({'error': error}), 400

    session = get_session()
    try:
        category = session.get(Category, category_id)
        if category is None:
            return jsonify({'error': 'Category not found'}), 404
        if name is not None:
            category.name = name
        if color is not None:
            category.color = color
        session.commit()
        return jsonify({'category': category.to_dict()})
    except Exception:
        session.rollback()
        logger.error("Error updating category %s", category_id, exc_info=True)
        return jsonify({'error': 'Failed to update category'}), 500
    finally:
        session.close()


@bp.route('/api/categories/<category_id>', methods=['DELETE'])
def delete_category(category_id):
    session = get_session()
    try:
        category = session.get(Category, category_id)
        if category is None:
            return jsonify({'error': 'Category not found'}), 404

        leads = session.query(Lead).filter(Lead.category_id == category_id).all()
        old_leads = [lead.to_dict(with_category=False) for lead in leads]
        for lead in leads:
            lead.category_id = None
        detached_videos = session.query(Video).filter(Video.category_id == category_id).update(
            {Video.category_id: None}, synchronize_session=False,
        )
        session.delete(category)
        session.commit()
        logger.info("Deleted category %s (detached %d leads, %d videos)",
                    category_id, len(leads), detached_videos)

        new_leads = {}
        if leads:
            lead_ids = [lead['id'] for lead in old_leads]
            new_leads = {
                lead.id: lead.to_dict(with_category=False)
                for lead in session.query(Lead).filter(Lead.id.in_(lead_ids))
            }
    except Exception:
        session.rollback()
        logger.error("Error deleting category %s", category_id, exc_info=True)
        return jsonify({'error': 'Failed to delete category'}), 500
    finally:
        session.close()

    log_activity(current_user(), 'delete_category', 'category', category_id)
    for old in old_leads:
        new = new_leads.get(old['id']) or {**old, 'category_id': None}
        realtime.publish_change('leads', 'UPDATE', new=new, old=old)
    return jsonify({'success': True})
