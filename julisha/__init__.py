import logging

from flask import Flask, current_app, request
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import inspect
from werkzeug.middleware.proxy_fix import ProxyFix

from julisha.config import Config

db = SQLAlchemy()
migrate = Migrate()

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ("signatures", "verification_codes", "rate_limit_windows")


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    if app.config.get("TRUST_PROXY"):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    from julisha.errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints
    from julisha.routes.main import bp as main_bp
    from julisha.routes.votes import bp as votes_bp
    from julisha.routes.admin import bp as admin_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(votes_bp, url_prefix="/votes")
    app.register_blueprint(admin_bp, url_prefix="/admin")

    app.after_request(add_cors_headers)

    with app.app_context():
        from julisha import models  # noqa: F401 - register tables with the metadata

        if app.config.get("AUTO_CREATE_SCHEMA"):
            db.create_all()

    return app


def verify_schema() -> None:
    """Raise SchemaMissingError if any required table is absent."""
    from julisha.errors import SchemaMissingError

    existing = set(inspect(db.engine).get_table_names())
    missing = [name for name in REQUIRED_TABLES if name not in existing]
    if missing:
        raise SchemaMissingError(
            "Database schema missing tables: %s (run `flask db upgrade`)" % ", ".join(missing)
        )
    logger.info("Database schema verified")


def add_cors_headers(resp):
    """Allow the static frontend, served from another origin, to call the API."""
    allowed = [o.strip() for o in current_app.config.get("CORS_ORIGINS", "*").split(",") if o.strip()]
    origin = request.headers.get("Origin")
    if "*" in allowed:
        resp.headers["Access-Control-Allow-Origin"] = "*"
    elif origin and origin in allowed:
        resp.headers["Access-Control-Allow-Origin"] = origin
        resp.headers["Vary"] = "Origin"
    resp.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
    resp.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    resp.headers["Access-Control-Max-Age"] = "3600"
    return resp
