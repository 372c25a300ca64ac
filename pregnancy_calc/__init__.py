from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
import logging
import os

# Setup basic logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s %(levelname)s: %(message)s'
)
logger = logging.getLogger(__name__)


def _setup_file_logging(app):
    """Rotating file log under LOG_DIR"""
    from logging.handlers import RotatingFileHandler

    log_dir = app.config['LOG_DIR']
    os.makedirs(log_dir, exist_ok=True)

    file_handler = RotatingFileHandler(
        os.path.join(log_dir, app.config['LOG_FILE']),
        maxBytes=app.config['LOG_MAX_BYTES'],
        backupCount=app.config['LOG_BACKUP_COUNT']
    )
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
    ))
    file_handler.setLevel(app.config['LOG_LEVEL'])
    logging.getLogger('pregnancy_calc').addHandler(file_handler)
    app.logger.addHandler(file_handler)


def create_app(config_name=None):
    """Create Flask application factory"""
    app = Flask(__name__)

    # Load configuration
    if config_name:
        from pregnancy_calc.config import config
        app.config.from_object(config.get(config_name, config['default']))
    else:
        from pregnancy_calc.config import get_config
        app.config.from_object(get_config())

    # Ensure production mode if FLASK_ENV is production
    if os.getenv('FLASK_ENV') == 'production':
        app.config['DEBUG'] = False
        app.config['TESTING'] = False

    logging.getLogger('pregnancy_calc').setLevel(app.config['LOG_LEVEL'])
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Global error handlers
    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'success': False,
            'error': 'Endpoint not found'
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({
            'success': False,
            'error': 'Method not allowed'
        }), 405

    @app.errorhandler(Exception)
    def handle_exception(e):
        if isinstance(e, HTTPException):
            return jsonify({
                'success': False,
                'error': e.description
            }), e.code
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        return jsonify({
            'success': False,
            'error': 'Internal server error. Check server logs for details.'
        }), 500

    # Setup logging
    if app.config.get('LOG_TO_FILE') and not app.debug and not app.testing:
        _setup_file_logging(app)
        app.logger.info('Application startup')

    # Register blueprints
    from .routes import calculator_bp, health_bp
    app.register_blueprint(health_bp)
    app.register_blueprint(calculator_bp)

    return app
