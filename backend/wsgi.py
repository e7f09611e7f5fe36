"""
wsgi.py — Process entry point.

    gunicorn backend.wsgi:app          # production
    python -m backend.wsgi             # local development server

The config is chosen by APP_ENV (or FLASK_ENV); see config.active_config_name().
"""

from backend.app import create_app
from backend.config import active_config_name

app = create_app(active_config_name())


if __name__ == "__main__":
    app.logger.info("Server listening on http://localhost:%s", app.config["PORT"])
    app.run(host="0.0.0.0", port=app.config["PORT"])
