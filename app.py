import atexit
import logging

from flask import Flask, jsonify
from flask_migrate import Migrate
from sqlalchemy import text
from werkzeug.exceptions import RequestEntityTooLarge
from dotenv import load_dotenv

from models import db
from services import AppState, SchoolServices
from services.file_host import ImageKitFileHost
from services.sheets_client import GoogleSheetsClient
from utils.errors import SchoolServiceError
from utils.settings import load_settings, sheets_configured, file_host_configured
from version import __version__, APP_NAME, APP_DESCRIPTION

# ---------------------------------------------------------------------------
# Load environment variables from .env
# ---------------------------------------------------------------------------
load_dotenv()

logger = logging.getLogger(__name__)

migrate = Migrate()


def register_error_handlers(app):

    @app.errorhandler(SchoolServiceError)
    def handle_service_error(e):
        if e.http_status >= 500:
            logger.error("%s: %s", e.code, e.message)
        return jsonify(e.to_dict()), e.http_status

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(e):
        return jsonify({'error': 'file_too_large', 'message': 'Uploaded file is too large.'}), 413


def register_blueprints(app):
    from routes.timetable_routes import timetable_bp
    from routes.attendance_routes import attendance_bp
    from routes.user_routes import user_bp
    from routes.student_routes import student_bp
    from routes.fee_routes import fee_bp
    from routes.marks_routes import marks_bp

    for blueprint in (timetable_bp, attendance_bp, user_bp, student_bp, fee_bp, marks_bp):
        app.register_blueprint(blueprint)


def create_app(overrides=None, state=None, sheets_store=None, file_host=None):
    """Build the Flask app.

    ``state``, ``sheets_store`` and ``file_host`` default to the process-wide
    state and the Google Sheets / ImageKit clients built from configuration;
    tests pass their own.
    """
    settings = load_settings(overrides)

    app = Flask(__name__)
    app.config.from_mapping(settings)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    if sheets_store is None:
        if not sheets_configured(app.config):
            logger.warning("Google Sheets not configured - attendance and user routes will fail")
        sheets_store = GoogleSheetsClient.from_config(app.config)
    if file_host is None:
        if not file_host_configured(app.config):
            logger.warning("ImageKit not configured - timetable routes will fail")
        file_host = ImageKitFileHost.from_config(app.config)

    # -----------------------------------------------------------------------
    # Database & migrations
    # -----------------------------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)

    # -----------------------------------------------------------------------
    # In-memory state and remote-backed services
    # -----------------------------------------------------------------------
    state = (state or AppState()).init_app(app)
    SchoolServices(state, sheets_store, file_host, app.config).init_app(app)

    register_blueprints(app)
    register_error_handlers(app)

    @app.route('/health')
    def health():
        return jsonify({
            'app': APP_NAME,
            'description': APP_DESCRIPTION,
            'version': __version__,
            'sheets_configured': sheets_configured(app.config),
            'file_host_configured': file_host_configured(app.config),
            'tracked_timetables': len(state.file_index),
        })

    @app.route('/db-test')
    def db_test():
        """Simple DB connectivity test"""
        try:
            with db.engine.connect() as conn:
                result = conn.execute(text('SELECT 1')).scalar()
            return jsonify({'db': 'connected', 'test_result': int(result)})
        except Exception as e:
            logger.error("Database check failed: %s", e)
            return jsonify({'db': 'error', 'error': str(e)}), 500

    return app


app = create_app()
atexit.register(app.extensions[AppState.extension_name].teardown)


# ---------------------------------------------------------------------------
# Local development only
# ---------------------------------------------------------------------------

if __name__ == '__main__':
    host = '127.0.0.1'
    port = app.config['PORT']
    logger.info("Running on http://%s:%s/", host, port)
    app.run(host=host, port=port, debug=True, threaded=True)
