import os
from datetime import timedelta

import click
from flask import Flask, redirect, render_template, request, url_for
from werkzeug.exceptions import HTTPException

from wanderlust.extensions import db, migrate
from wanderlust.segments.segment_listings import listings_bp
from wanderlust.segments.segment_reviews import reviews_bp
from wanderlust.segments.segment_users_auth_routes import users_bp
from wanderlust.utils.auth_gate import init_auth
from wanderlust.utils.context import install_request_context
from wanderlust.utils.errors import error_view_args
from wanderlust.utils.method_override import MethodOverrideMiddleware
from wanderlust.utils.observability import init_sentry, install_request_observers


def _env_int(name: str, default: int, *, minimum: int = 1, maximum: int = 100000) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        value = int(default)
    else:
        try:
            value = int(raw)
        except ValueError:
            value = int(default)
    if value < minimum:
        value = minimum
    if value > maximum:
        value = maximum
    return value


def _env_flag(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


def create_app():
    app = Flask(__name__)
    init_sentry(app)

    env = (os.getenv("WANDERLUST_ENV", "dev") or "dev").strip().lower()
    is_prod = env in ("prod", "production")

    # Production safety checks
    if is_prod:
        secret = (os.getenv("SECRET_KEY") or "").strip()
        if not secret or len(secret) < 16:
            raise RuntimeError("SECRET_KEY must be set and at least 16 chars in production")
        if not (os.getenv("DATABASE_URL") or "").strip() and not (os.getenv("SQLALCHEMY_DATABASE_URI") or "").strip():
            raise RuntimeError("DATABASE_URL (or SQLALCHEMY_DATABASE_URI) must be set in production")

    # Basic config
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", "dev-secret")
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False

    # Session cookie: server-signed, 7 days unless overridden.
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(days=_env_int("SESSION_TTL_DAYS", 7, minimum=1, maximum=365))
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["SESSION_COOKIE_SECURE"] = _env_flag("SESSION_COOKIE_SECURE", is_prod)

    # Database config
    database_url = os.getenv("SQLALCHEMY_DATABASE_URI") or os.getenv("DATABASE_URL")
    if not database_url:
        # Default SQLite file lives in the instance dir
        instance_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "instance"))
        os.makedirs(instance_dir, exist_ok=True)
        database_url = f"sqlite:///{os.path.join(instance_dir, 'wanderlust.db').replace(os.sep, '/')}"
    app.config["SQLALCHEMY_DATABASE_URI"] = database_url
    if not database_url.startswith("sqlite://"):
        engine_options = {
            "pool_pre_ping": True,
            "pool_reset_on_return": "rollback",
            "pool_recycle": _env_int("DB_POOL_RECYCLE_SECONDS", 1800, minimum=60, maximum=86400),
            "pool_size": _env_int("DB_POOL_SIZE", 10, minimum=1, maximum=200),
            "max_overflow": _env_int("DB_MAX_OVERFLOW", 20, minimum=0, maximum=500),
            "pool_timeout": _env_int("DB_POOL_TIMEOUT_SECONDS", 30, minimum=1, maximum=300),
        }
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = engine_options
        app.logger.info(
            "db_pooling_enabled pool_size=%s max_overflow=%s pool_timeout=%s pool_recycle=%s",
            engine_options["pool_size"],
            engine_options["max_overflow"],
            engine_options["pool_timeout"],
            engine_options["pool_recycle"],
        )

    # HTML forms tunnel PUT/DELETE through ?_method=
    app.wsgi_app = MethodOverrideMiddleware(app.wsgi_app)

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db, directory=os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "migrations")))
    init_auth(app)
    install_request_observers(app)
    install_request_context(app)

    if _env_flag("AUTO_CREATE_TABLES", not is_prod):
        with app.app_context():
            import wanderlust.models  # noqa: F401

            db.create_all()

    @app.errorhandler(HTTPException)
    def _http_exception(error: HTTPException):
        status, message = error_view_args(error)
        if status >= 500:
            app.logger.error("http_error status=%s path=%s", status, request.path)
        return render_template("error.html", message=message, status=status), status

    @app.errorhandler(Exception)
    def _unhandled_exception(error: Exception):
        app.logger.exception("unhandled_exception path=%s", request.path)
        db.session.rollback()
        status, message = error_view_args(error)
        return render_template("error.html", message=message, status=status), status

    app.register_blueprint(listings_bp)
    app.register_blueprint(reviews_bp)
    app.register_blueprint(users_bp)

    @app.get("/")
    def root():
        return redirect(url_for("listings_bp.index"))

    @app.cli.command("init-db")
    def init_db_command():
        """Create the listings, reviews and users tables."""
        import wanderlust.models  # noqa: F401

        db.create_all()
        click.echo("init_db_ok")

    return app
