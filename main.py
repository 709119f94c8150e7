"""
Development server for the FinSync API.

Production deployments point a WSGI server at ``main:app``; running this
module directly starts Flask's built-in server instead.
"""

from finsync import create_app, describe_database
import logging
import os

logger = logging.getLogger(__name__)

app = create_app()


if __name__ == "__main__":
    host = os.getenv('HOST', '127.0.0.1')
    port = int(os.getenv('PORT', 5000))
    debug = os.getenv('FLASK_ENV') == 'development'

    logger.info("FinSync API on http://%s:%s (debug=%s)", host, port, debug)
    logger.info("Database: %s", describe_database(app.config['SQLALCHEMY_DATABASE_URI']))
    logger.info("Run 'flask --app main seed-demo' to load demo data")

    app.run(host=host, port=port, debug=debug)
