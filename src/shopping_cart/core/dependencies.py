from typing import TypeVar, Type, Dict, Any, Callable

from flask import current_app
from sqlalchemy.orm import sessionmaker

from shopping_cart.core.config import config
from shopping_cart.repositories.cart_repository import CartRepository
from shopping_cart.repositories.product_repository import ProductRepository
from shopping_cart.services.cart_service import CartService
from shopping_cart.services.product_service import ProductService

T = TypeVar('T')

EXTENSION_KEY = "shopping_cart.container"


class DependencyContainer:
    """Simple dependency injection container"""

    def __init__(self):
        self._services: Dict[str, Any] = {}
        self._factories: Dict[str, Callable] = {}

    def register_factory(self, service_class: Type[T], factory: Callable[[], T]) -> None:
        """Register a factory function for creating instances"""
        key = self._get_service_key(service_class)
        self._factories[key] = factory

    def get(self, service_class: Type[T]) -> T:
        """Get service instance"""
        key = self._get_service_key(service_class)

        if key in self._services:
            return self._services[key]

        # Factories are resolved once and cached as singletons
        if key in self._factories:
            instance = self._factories[key]()
            self._services[key] = instance
            return instance

        raise ValueError(f"Service {service_class.__name__} not registered")

    def _get_service_key(self, service_class: Type[T]) -> str:
        """Get unique key for service class"""
        return f"{service_class.__module__}.{service_class.__qualname__}"


def build_container(session_factory: sessionmaker) -> DependencyContainer:
    """Wire repositories and services for one application instance"""
    container = DependencyContainer()

    container.register_factory(
        CartRepository,
        lambda: CartRepository(session_factory, config.store.read_retries)
    )
    container.register_factory(
        ProductRepository,
        lambda: ProductRepository(session_factory, config.store.read_retries)
    )
    container.register_factory(
        CartService,
        lambda: CartService(
            container.get(CartRepository),
            container.get(ProductRepository),
            conflict_retries=config.cart.conflict_retries,
            max_items_per_cart=config.cart.max_items_per_cart,
        )
    )
    container.register_factory(
        ProductService,
        lambda: ProductService(container.get(ProductRepository))
    )
    return container


def get_container() -> DependencyContainer:
    """Container attached to the current Flask app"""
    return current_app.extensions[EXTENSION_KEY]


def get_cart_service() -> CartService:
    return get_container().get(CartService)


def get_product_service() -> ProductService:
    return get_container().get(ProductService)
