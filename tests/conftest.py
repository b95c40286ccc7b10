import pytest

from shopcart.app import create_app
from shopcart.core.config import APIConfig, AppConfig, CartConfig, Config
from shopcart.models.user import User
from shopcart.repositories.cart_repository import InMemoryCartRepository
from shopcart.repositories.product_repository import InMemoryProductCatalog
from shopcart.seed import demo_products
from shopcart.services.cart_service import CartService


@pytest.fixture
def catalog():
    return InMemoryProductCatalog(demo_products())


@pytest.fixture
def cart_repo():
    return InMemoryCartRepository()


@pytest.fixture
def cart_service(cart_repo, catalog):
    return CartService(cart_repo, catalog, CartConfig())


@pytest.fixture
def user():
    return User("3", "Regular User", "user@example.com")


@pytest.fixture
def cart(cart_service, user):
    return cart_service.get_or_create_user_cart(user)


@pytest.fixture
def app_config():
    return Config(
        app=AppConfig(environment="testing", log_level="WARNING"),
        api=APIConfig(),
        cart=CartConfig(),
    )


@pytest.fixture
def app(app_config):
    application = create_app(app_config)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def test_client(app):
    return app.test_client()


@pytest.fixture
def auth_headers():
    return {"X-User-Id": "3"}
