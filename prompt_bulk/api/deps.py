"""FastAPI dependencies for dependency injection.

Provides reusable dependencies for routes including:
- Application settings and component factory
- Record store (SQL session or in-memory)
- Prompt generator
"""

import math
from collections.abc import AsyncGenerator

from fastapi import Depends, Query, Request

from prompt_bulk.core.config import Settings
from prompt_bulk.core.factory import ComponentFactory
from prompt_bulk.db.session import get_async_session
from prompt_bulk.interfaces.generation import BasePromptGenerator
from prompt_bulk.interfaces.store import BaseRecordStore


def get_app_settings(request: Request) -> Settings:
    """Dependency returning the settings the app was created with."""
    return request.app.state.settings


def get_component_factory(request: Request) -> ComponentFactory:
    """Dependency returning the app's component factory."""
    return request.app.state.factory


async def get_store(
    settings: Settings = Depends(get_app_settings),
    factory: ComponentFactory = Depends(get_component_factory),
) -> AsyncGenerator[BaseRecordStore, None]:
    """Dependency for getting the configured record store.

    Opens a database session for the 'sql' backend; the session is closed
    when the request finishes.

    Args:
        settings: Application settings.
        factory: Component factory.

    Yields:
        A record store.
    """
    if not factory.uses_database:
        yield factory.get_store()
        return

    async for session in get_async_session(settings):
        yield factory.get_store(session)


def get_generator(
    store: BaseRecordStore = Depends(get_store),
    factory: ComponentFactory = Depends(get_component_factory),
) -> BasePromptGenerator:
    """Dependency for getting a prompt generator bound to the request's store."""
    return factory.get_generator(store)


class Pagination:
    """Page/page-size query parameters, capped by ``page_size_max``."""

    def __init__(
        self,
        page: int = Query(default=1, ge=1, description="1-based page number"),
        page_size: int = Query(default=50, ge=1, alias="pageSize", description="Items per page"),
        settings: Settings = Depends(get_app_settings),
    ) -> None:
        self.page = page
        self.page_size = min(page_size, settings.page_size_max)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def slice(self, items: list) -> list:
        return items[self.offset : self.offset + self.page_size]

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.page_size)
