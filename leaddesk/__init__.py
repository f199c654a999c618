"""
Flask application factory.

Creates and configures the Flask app, registers all blueprints.
"""
import logging

from flask import Flask, jsonify, request


def create_app():
    """Create and configure the Flask application."""
    from leaddesk.logging_config import configure_logging
    from leaddesk.config import SECRET_KEY, VIDEO_MAX_BYTES

    app = Flask(__name__)

    configure_logging(app)
    logger = logging.getLogger('leaddesk')

    app.secret_key = SECRET_KEY
    # Multipart overhead on top of the largest accepted video
    app.config['MAX_CONTENT_LENGTH'] = VIDEO_MAX_BYTES + 1024 * 1024
    app.json.sort_keys = False

    # ── Auth ────────────────────────────────────────────────────────────
    from leaddesk.auth import load_current_user, current_user

    OPEN_PATHS = {'/health'}

    @app.before_request
    def require_login():
        load_current_user()
        if request.path in OPEN_PATHS or not request.path.startswith('/api/'):
            return
        if current_user() is None:
            return jsonify({'error': 'Unauthorized'}), 401

    # ── JSON errors ─────────────────────────────────────────────────────
    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(413)
    def too_large(e):
        return jsonify({'error': 'File too large'}), 413

    @app.errorhandler(500)
    def server_error(e):
        logger.error("Unhandled error on %s %s", request.method, request.path, exc_info=True)
        return jsonify({'error': 'An unexpected error occurred'}), 500

    # Register blueprints
    from leaddesk.routes.health import bp as health_bp
    from leaddesk.routes.categories import bp as categories_bp
    from leaddesk.routes.charts import bp as charts_bp
    from leaddesk.routes.leads import bp as leads_bp
    from leaddesk.routes.videos import bp as videos_bp
    from leaddesk.routes.activity_logs import bp as activity_logs_bp
    from leaddesk.routes.user_roles import bp as user_roles_bp
    from leaddesk.routes.mfa import bp as mfa_bp
    from leaddesk.routes.sales import bp as sales_bp
    from leaddesk.routes.generate import bp as generate_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(charts_bp)
    app.register_blueprint(leads_bp)
    app.register_blueprint(videos_bp)
    app.register_blueprint(activity_logs_bp)
    app.register_blueprint(user_roles_bp)
    app.register_blueprint(mfa_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(generate_bp)

    # Import models so Base.metadata knows about them (required for SQLAlchemy).
    # Schema is managed by Alembic: no create_all() call.
    import importlib
    importlib.import_module('leaddesk.models.category')
    importlib.import_module('leaddesk.models.lead')
    importlib.import_module('leaddesk.models.video')
    importlib.import_module('leaddesk.models.activity_log')
    importlib.import_module('leaddesk.models.user_role')
    importlib.import_module('leaddesk.models.mfa_factor')
    importlib.import_module('leaddesk.models.sales')

    return app
