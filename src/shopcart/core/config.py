import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


@dataclass
class CartConfig:
    """Cart store settings"""
    simulated_latency_ms: int = 0  # Mimics a slow backing store
    operation_history_size: int = 50
    default_history_limit: int = 10


@dataclass
class APIConfig:
    """API-specific configuration"""
    version: str = "v1"
    title: str = "Shopcart API"
    max_quantity_per_request: int = 10


@dataclass
class AppConfig:
    """Application configuration"""
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 5000
    environment: str = "development"  # development, testing, production
    log_level: str = "INFO"


@dataclass
class Config:
    app: AppConfig = field(default_factory=AppConfig)
    api: APIConfig = field(default_factory=APIConfig)
    cart: CartConfig = field(default_factory=CartConfig)

    @classmethod
    def from_env(cls) -> "Config":
        environment = os.getenv("ENVIRONMENT", "development")
        return cls(
            app=AppConfig(
                debug=_env_bool("DEBUG"),
                host=os.getenv("HOST", "0.0.0.0"),
                port=int(os.getenv("PORT", "5000")),
                environment=environment,
                log_level=os.getenv("LOG_LEVEL", "INFO"),
            ),
            api=APIConfig(
                max_quantity_per_request=int(os.getenv("MAX_QUANTITY_PER_REQUEST", "10")),
            ),
            cart=CartConfig(
                simulated_latency_ms=int(os.getenv("CART_SIMULATED_LATENCY_MS", "0")),
                operation_history_size=int(os.getenv("CART_HISTORY_SIZE", "50")),
            ),
        )

    @property
    def is_development(self) -> bool:
        return self.app.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.app.environment == "production"

    def validate(self) -> None:
        """Validate critical configuration"""
        if self.cart.simulated_latency_ms < 0:
            raise ValueError("CART_SIMULATED_LATENCY_MS cannot be negative")
        if self.cart.operation_history_size < 1:
            raise ValueError("CART_HISTORY_SIZE must be at least 1")
        if self.api.max_quantity_per_request < 1:
            raise ValueError("MAX_QUANTITY_PER_REQUEST must be at least 1")
        if self.is_production and self.app.debug:
            raise ValueError("DEBUG must be disabled in production")


config = Config.from_env()
