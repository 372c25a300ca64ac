"""
Development server entry point
Run the Flask application with: python run.py
"""
from pregnancy_calc import create_app
import logging
import os

logger = logging.getLogger(__name__)

app = create_app()

if __name__ == '__main__':
    host = os.getenv('FLASK_HOST', '127.0.0.1')
    port = int(os.getenv('FLASK_PORT', 5000))
    debug = os.getenv('FLASK_ENV', 'development') == 'development'

    logger.info(
        "Starting pregnancy calculator on %s:%s (debug=%s, default method=%s)",
        host, port, debug, app.config['DEFAULT_CALCULATION_METHOD']
    )
    app.run(host=host, port=port, debug=debug, threaded=True)
