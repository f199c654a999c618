"""
Chart routes: category distribution for the dashboard pie chart.
"""
import logging
from flask import Blueprint, jsonify

from leaddesk.database import get_session
from leaddesk.services.charts import category_counts

logger = logging.getLogger('routes.charts')

bp = Blueprint('charts', __name__)


@bp.route('/api/chart/categories')
def categories_chart():
    session = get_session()
    try:
        return jsonify({'chartData': category_counts(session)})
    except Exception:
        logger.error("Error building category chart", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred'}), 500
    finally:
        session.close()
