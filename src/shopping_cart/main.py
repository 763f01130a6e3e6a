import logging
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, jsonify
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from shopping_cart.core.config import config
from shopping_cart.core.dependencies import EXTENSION_KEY, build_container
from shopping_cart.core.exceptions import BaseAPIException
from shopping_cart.db import Base, build_engine, build_session_factory
from shopping_cart.routes.products import products_bp
from shopping_cart.routes.cart import cart_bp
import shopping_cart.orm  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error(status: int, code: str, message: str):
    return jsonify({
        "success": False,
        "error": {"code": code, "message": message},
        "timestamp": _timestamp(),
    }), status


def create_app(engine: Optional[Engine] = None, create_schema: Optional[bool] = None) -> Flask:
    """
    Application factory.

    Tests pass their own engine (usually in-memory SQLite); otherwise one is
    built from DATABASE_URL. Tables are created on startup in development
    or when create_schema is set.
    """
    config.validate()
    logging.basicConfig(
        level=config.app.log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    app = Flask(__name__)

    engine = engine or build_engine()
    if create_schema is None:
        create_schema = config.is_development
    if create_schema:
        Base.metadata.create_all(engine)

    app.extensions[EXTENSION_KEY] = build_container(build_session_factory(engine))

    # ------------------------------------------------------------------ #
    # Blueprints                                                           #
    # ------------------------------------------------------------------ #
    app.register_blueprint(products_bp, url_prefix="/api/products")
    app.register_blueprint(cart_bp,     url_prefix="/api/cart")

    # ------------------------------------------------------------------ #
    # Error handlers: consistent JSON error envelope                      #
    # ------------------------------------------------------------------ #
    @app.errorhandler(BaseAPIException)
    def api_error(e: BaseAPIException):
        if e.status_code >= 500:
            logger.error(f"{e.error_code}: {e.internal_message}")
        else:
            logger.info(f"{e.error_code}: {e.message}")
        body = e.to_dict()
        body["timestamp"] = _timestamp()
        return jsonify(body), e.status_code

    @app.errorhandler(400)
    def bad_request(e):
        return _error(400, "BAD_REQUEST", str(e.description))

    @app.errorhandler(404)
    def not_found(e):
        return _error(404, "NOT_FOUND", str(e.description))

    @app.errorhandler(405)
    def method_not_allowed(e):
        return _error(405, "METHOD_NOT_ALLOWED", str(e.description))

    @app.errorhandler(SQLAlchemyError)
    def db_error(e):
        logger.error(f"Unhandled database error: {e}")
        return _error(500, "DATABASE_ERROR", "A database error occurred.")

    @app.errorhandler(500)
    def internal_error(e):
        return _error(500, "INTERNAL_ERROR", "An internal server error occurred.")

    # ------------------------------------------------------------------ #
    # Health check                                                         #
    # ------------------------------------------------------------------ #
    @app.get("/health")
    def health():
        """Liveness + readiness probe. Returns 503 if the store is unreachable."""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return jsonify({
                "status": "ok",
                "database": "reachable",
                "timestamp": _timestamp(),
            }), 200
        except SQLAlchemyError as exc:
            logger.error(f"Health check failed: {exc}")
            return jsonify({"status": "error", "database": "unreachable"}), 503

    return app


if __name__ == "__main__":
    application = create_app()
    application.run(debug=config.app.debug, host=config.app.host, port=config.app.port)
