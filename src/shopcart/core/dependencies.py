import threading
from typing import Any, Callable, Dict, Type, TypeVar

T = TypeVar('T')


class DependencyContainer:
    """
    Per-application service registry.

    Factories run lazily on first lookup and their result is kept, so every
    request thread shares one cart store and one catalog.
    """

    def __init__(self):
        self._instances: Dict[type, Any] = {}
        self._factories: Dict[type, Callable[[], Any]] = {}
        # Reentrant: a factory may look up the services it depends on
        self._lock = threading.RLock()

    def register_singleton(self, service_class: Type[T], instance: T) -> None:
        with self._lock:
            self._instances[service_class] = instance

    def register_factory(self, service_class: Type[T], factory: Callable[[], T]) -> None:
        with self._lock:
            self._factories[service_class] = factory
            self._instances.pop(service_class, None)

    def get(self, service_class: Type[T]) -> T:
        """Resolve a service, building it on first use"""
        with self._lock:
            if service_class in self._instances:
                return self._instances[service_class]

            factory = self._factories.get(service_class)
            if factory is None:
                raise ValueError(f"Service {service_class.__name__} not registered")

            instance = factory()
            self._instances[service_class] = instance
            return instance

    def is_registered(self, service_class: type) -> bool:
        return service_class in self._instances or service_class in self._factories
