import logging
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from shopcart import __version__
from shopcart.core.config import Config, config as default_config
from shopcart.core.dependencies import DependencyContainer
from shopcart.core.exceptions import BaseAPIException
from shopcart.repositories.cart_repository import CartRepository, InMemoryCartRepository
from shopcart.repositories.product_repository import ProductCatalog, InMemoryProductCatalog
from shopcart.routes import cart_bp, products_bp
from shopcart.routes.utils import error_response
from shopcart.seed import demo_products, demo_users
from shopcart.services.cart_service import CartService
from shopcart.services.user_service import DemoUserDirectory

logger = logging.getLogger(__name__)


def build_container(app_config: Config) -> DependencyContainer:
    """Wire the in-memory stores and services for one application instance."""
    container = DependencyContainer()
    container.register_singleton(Config, app_config)
    container.register_factory(CartRepository, InMemoryCartRepository)
    container.register_factory(ProductCatalog, lambda: InMemoryProductCatalog(demo_products()))
    container.register_factory(DemoUserDirectory, lambda: DemoUserDirectory(demo_users()))
    container.register_factory(
        CartService,
        lambda: CartService(
            container.get(CartRepository),
            container.get(ProductCatalog),
            app_config.cart,
        ),
    )
    return container


def create_app(
    app_config: Optional[Config] = None,
    container: Optional[DependencyContainer] = None,
) -> Flask:
    """
    Application factory.

    Every call builds fresh in-memory stores, so each app instance (and each
    test) starts with no carts.
    """
    app_config = app_config or default_config
    app_config.validate()

    logging.basicConfig(
        level=app_config.app.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    app = Flask(__name__)
    app.config["DEBUG"] = app_config.app.debug
    app.extensions["shopcart"] = container or build_container(app_config)

    # ------------------------------------------------------------------ #
    # Blueprints, mounted under /api/<version>/                            #
    # ------------------------------------------------------------------ #
    prefix = f"/api/{app_config.api.version}"
    app.register_blueprint(products_bp, url_prefix=f"{prefix}/products")
    app.register_blueprint(cart_bp,     url_prefix=f"{prefix}/carts")

    # ------------------------------------------------------------------ #
    # Error handlers: every failure leaves as the JSON error envelope      #
    # ------------------------------------------------------------------ #
    @app.errorhandler(BaseAPIException)
    def api_error(e: BaseAPIException):
        if e.status_code >= 500:
            logger.error(f"API error: {e.internal_message}")
        else:
            logger.info(f"API error {e.status_code}: {e.message}")
        return error_response(e.error_code, e.message, e.status_code, e.details)

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        code = (e.name or "HTTP error").upper().replace(" ", "_")
        return error_response(code, str(e.description), e.code or 500)

    @app.errorhandler(Exception)
    def internal_error(e: Exception):
        logger.exception(f"Unhandled error: {e}")
        return error_response("INTERNAL_ERROR", "An internal server error occurred.", 500)

    # ------------------------------------------------------------------ #
    # Health check                                                         #
    # ------------------------------------------------------------------ #
    @app.get("/health")
    def health():
        """Liveness probe."""
        return jsonify({
            "status": "ok",
            "version": __version__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }), 200

    return app


if __name__ == "__main__":
    application = create_app()
    application.run(
        debug=default_config.app.debug,
        host=default_config.app.host,
        port=default_config.app.port,
    )
