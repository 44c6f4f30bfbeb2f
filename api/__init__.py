import logging

from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from models import CatalogService, get_storage

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0.0",
    "info": {
        "title": "Literary Catalog API",
        "version": "1.0.0",
        "description": "REST API for managing books, newspapers, authors, publishers, categories and stock.",
    },
    "basePath": "/",  # Blueprints are mounted under /api/v1
    "schemes": ["http"],
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def create_app(config_name: str | None = None, overrides: dict | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
      - config is picked by name or APP_ENV, then `overrides` are applied
        (tests use them to point storage at a temporary location)
      - one CatalogService per app, stored in app.extensions["catalog"]
    """
    app = Flask(__name__)

    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(level=app.config.get("LOG_LEVEL", "INFO"), format=LOG_FORMAT)

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)

    storage = get_storage(
        app.config["STORAGE_TYPE"],
        data_dir=app.config["DATA_DIR"],
        database_url=app.config["DATABASE_URL"],
    )
    # Responses keep the schema field order
    app.json.sort_keys = False

    app.extensions["catalog"] = CatalogService(storage)

    from .health import bp as health_bp
    from .books import bp as books_bp
    from .newspapers import bp as newspapers_bp
    from .authors import bp as authors_bp
    from .categories import bp as categories_bp
    from .publishers import bp as publishers_bp
    from .catalog import bp as catalog_bp

    app.register_blueprint(health_bp, url_prefix="/api/v1")
    app.register_blueprint(books_bp, url_prefix="/api/v1")
    app.register_blueprint(newspapers_bp, url_prefix="/api/v1")
    app.register_blueprint(authors_bp, url_prefix="/api/v1")
    app.register_blueprint(categories_bp, url_prefix="/api/v1")
    app.register_blueprint(publishers_bp, url_prefix="/api/v1")
    app.register_blueprint(catalog_bp, url_prefix="/api/v1")

    @app.route("/")
    def root():
        return {
            "message": "Welcome to the Literary Catalog API",
            "docs": "/apidocs/",
            "health": "/api/v1/health",
        }, 200

    return app
