"""Runtime facade for daemon/app integration."""

from .service import BoardRuntimeSettings, RuntimeService, get_runtime_service, load_runtime_settings

__all__ = [
    "BoardRuntimeSettings",
    "RuntimeService",
    "get_runtime_service",
    "load_runtime_settings",
]
