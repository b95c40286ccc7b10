from concurrent.futures import ThreadPoolExecutor

import pytest

from shopcart.core.config import AppConfig, CartConfig, Config
from shopcart.core.dependencies import DependencyContainer
from shopcart.models.user import User
from shopcart.seed import demo_users
from shopcart.services.user_service import DemoUserDirectory


class TestConfig:

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("CART_SIMULATED_LATENCY_MS", "150")
        monkeypatch.setenv("MAX_QUANTITY_PER_REQUEST", "4")
        monkeypatch.setenv("DEBUG", "false")

        cfg = Config.from_env()

        assert cfg.is_production
        assert cfg.cart.simulated_latency_ms == 150
        assert cfg.api.max_quantity_per_request == 4
        cfg.validate()

    def test_defaults(self):
        cfg = Config()

        assert cfg.cart.simulated_latency_ms == 0
        assert cfg.cart.operation_history_size == 50
        assert cfg.is_development

    @pytest.mark.parametrize("cfg", [
        Config(cart=CartConfig(simulated_latency_ms=-1)),
        Config(cart=CartConfig(operation_history_size=0)),
        Config(app=AppConfig(environment="production", debug=True)),
    ])
    def test_validate_rejects(self, cfg):
        with pytest.raises(ValueError):
            cfg.validate()


class TestDependencyContainer:

    def test_factory_is_cached(self):
        container = DependencyContainer()
        container.register_factory(DemoUserDirectory, lambda: DemoUserDirectory(demo_users()))

        assert container.is_registered(DemoUserDirectory)
        assert container.get(DemoUserDirectory) is container.get(DemoUserDirectory)

    def test_unregistered_service(self):
        with pytest.raises(ValueError):
            DependencyContainer().get(Config)

    def test_factory_runs_once_across_threads(self):
        calls = []

        def build():
            calls.append(1)
            return DemoUserDirectory(demo_users())

        container = DependencyContainer()
        container.register_factory(DemoUserDirectory, build)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: container.get(DemoUserDirectory), range(32)))

        assert len(calls) == 1
        assert all(r is results[0] for r in results)


class TestDemoUserDirectory:

    def test_lookup(self):
        users = DemoUserDirectory(demo_users())

        assert users.get_user("3") == User("3", "Regular User", "user@example.com")
        assert users.get_user("42") is None
        assert users.get_user(None) is None
