"""FastAPI routers and dependencies."""

from prompt_bulk.api.deps import (
    get_app_settings,
    get_component_factory,
    get_generator,
    get_store,
)
from prompt_bulk.api.generation import router as generation_router
from prompt_bulk.api.presets import router as presets_router
from prompt_bulk.api.templates import router as templates_router

__all__ = [
    "get_app_settings",
    "get_component_factory",
    "get_generator",
    "get_store",
    "generation_router",
    "presets_router",
    "templates_router",
]
