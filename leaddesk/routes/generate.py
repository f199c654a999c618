"""
Demo data route: bulk-insert fake leads (admin only).
"""
import logging
from flask import Blueprint, jsonify

from leaddesk.auth import current_user, require_admin
from leaddesk.config import GENERATE_TOTAL_LEADS
from leaddesk.database import get_session
from leaddesk.services import realtime
from leaddesk.services.activity import log_activity
from leaddesk.services.generator import NoCategoriesError, generate_leads

logger = logging.getLogger('routes.generate')

bp = Blueprint('generate', __name__)


@bp.route('/api/generate-data', methods=['POST'])
@require_admin
def generate_data():
    session = get_session()
    try:
        created = generate_leads(session, total=GENERATE_TOTAL_LEADS)
    except NoCategoriesError as e:
        logger.error("Cannot generate leads: %s", e)
        return jsonify({'success': False, 'error': str(e)}), 500
    except Exception as e:
        session.rollback()
        logger.error("Error generating leads", exc_info=True)
        return jsonify({'success': False, 'error': str(e)}), 500
    finally:
        session.close()

    for lead in created:
        realtime.publish_change('leads', 'INSERT', new=lead)
    log_activity(current_user(), 'generate_data', 'lead', None, {'count': len(created)})
    return jsonify({'success': True, 'message': f'Successfully inserted {len(created)} leads'})
