from flask import Flask, request, g, jsonify
from flask_migrate import Migrate
from sqlalchemy.exc import SQLAlchemyError

from config import Config
from models import db
from routes import health_bp, auth_bp, room_bp, booking_bp, cleaning_bp, receipt_bp, dashboard_bp
from security.csrf import require_csrf
from services.errors import FrontDeskError
from utils.auth_context import load_current_user


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(room_bp)
    app.register_blueprint(booking_bp)
    app.register_blueprint(cleaning_bp)
    app.register_blueprint(receipt_bp)
    app.register_blueprint(dashboard_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    @app.before_request
    def _load_user():
        load_current_user()

    CSRF_EXEMPT_PATHS = {
        "/auth/login",
        "/health",
    }

    @app.before_request
    def _csrf_protect():
        # Only state-changing requests from a logged-in session
        if request.method in ("POST", "PUT", "PATCH", "DELETE"):
            if request.path in CSRF_EXEMPT_PATHS:
                return None
            if getattr(g, "user", None) is not None:
                failure = require_csrf()
                if failure:
                    return failure

    @app.errorhandler(FrontDeskError)
    def _front_desk_error(exc):
        if exc.status_code >= 500:
            app.logger.error("%s: %s", type(exc).__name__, exc.message)
        else:
            app.logger.info("Rejected %s %s: %s", request.method, request.path, exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(SQLAlchemyError)
    def _storage_error(exc):
        db.session.rollback()
        app.logger.exception("Storage failure on %s %s", request.method, request.path)
        return jsonify(error="Storage failure"), 500

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    return app

#-------------------------
import click
from utils.seed import seed_rooms, upsert_user

def register_cli(app):
    @app.cli.command("seed-rooms")
    def seed_rooms_command():
        """Create the room directory, cleaning rows and booking counter (idempotent)."""
        added = seed_rooms()
        click.echo(f"{added} room(s) added")

    @app.cli.command("create-user")
    @click.argument("username")
    @click.password_option()
    def create_user_command(username, password):
        """Create a front-desk login, or reset its password."""
        user = upsert_user(username.strip(), password)
        click.echo(f"{user.username} ready")

#-------------------------


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
