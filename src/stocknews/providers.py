"""Provider factory: creates the right query service based on config."""

from stocknews.config import AppConfig, Secrets
from stocknews.store.base import DocumentQueryService

STORE_PROVIDERS = {
    "firestore": "stocknews.store.firestore:FirestoreQueryService",
    "fixture": "stocknews.store.fixture:FixtureQueryService",
}


def _import_class(path: str):
    """Import a class from a 'module:ClassName' string."""
    module_path, class_name = path.split(":")
    import importlib

    module = importlib.import_module(module_path)
    return getattr(module, class_name)


def create_query_service(config: AppConfig, secrets: Secrets) -> DocumentQueryService:
    """Create a document query service based on config.providers.store."""
    name = config.providers.store
    if name not in STORE_PROVIDERS:
        raise ValueError(
            f"Unknown store provider: '{name}'. Available: {list(STORE_PROVIDERS.keys())}"
        )
    cls = _import_class(STORE_PROVIDERS[name])
    return cls(config, secrets)
