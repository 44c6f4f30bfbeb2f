"""
Entrypoint for running the API in development.
The catalog is saved once more after the server stops.
"""
import logging
import os
from . import create_app
from .lookups import get_catalog

# Respect APP_ENV for configuration selection (handled in get_config())
app = create_app()

if __name__ == "__main__":
    # Dev-friendly defaults; in production you'd run via a WSGI server (gunicorn/uwsgi)
    host = os.getenv("FLASK_RUN_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_RUN_PORT", "8000"))
    debug = bool(os.getenv("FLASK_DEBUG", str(app.config.get("DEBUG", True))).lower() in ("1", "true", "yes"))
    try:
        # The reloader would build a second catalog in a child process
        app.run(host=host, port=port, debug=debug, use_reloader=False)
    finally:
        with app.app_context():
            if not get_catalog().save_all():
                logging.getLogger(__name__).error("Final save failed")
