from .session import (
    EngineSession,
    EngineSessionFactory,
    create_engine_from_settings,
    product_for_engine,
)

__all__ = [
    "EngineSession",
    "EngineSessionFactory",
    "create_engine_from_settings",
    "product_for_engine",
]
