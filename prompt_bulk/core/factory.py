"""Component Factory for strategy instantiation.

The Factory Pattern allows the application to pick the record store
backing at runtime based on configuration or environment variables.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from prompt_bulk.core.config import Settings, get_settings
from prompt_bulk.interfaces.generation import BasePromptGenerator
from prompt_bulk.interfaces.store import BaseRecordStore
from prompt_bulk.strategies.generation import PromptGenerator
from prompt_bulk.strategies.stores import InMemoryRecordStore, SQLRecordStore

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Example:
        ```python
        factory = ComponentFactory(get_settings())

        store = factory.get_store(session)
        generator = factory.get_generator(store)
        result = await generator.generate(template_ids, source)
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._memory_store_cache: InMemoryRecordStore | None = None

    @property
    def uses_database(self) -> bool:
        """Whether the configured store needs a database session."""
        return self._settings.store_backend == "sql"

    def get_store(self, session: AsyncSession | None = None) -> BaseRecordStore:
        """Get a record store for the configured backend.

        Args:
            session: Database session, required for the 'sql' backend.

        Returns:
            A BaseRecordStore implementation instance.

        Raises:
            ValueError: If the backend is unknown or a session is missing.
        """
        match self._settings.store_backend:
            case "sql":
                if session is None:
                    raise ValueError("A database session is required for the 'sql' store")
                return SQLRecordStore(session)
            case "memory":
                if self._memory_store_cache is None:
                    logger.info("Instantiating in-memory record store")
                    self._memory_store_cache = InMemoryRecordStore()
                return self._memory_store_cache
            case _:
                raise ValueError(
                    f"Unknown store backend: {self._settings.store_backend}. "
                    f"Valid options: 'sql', 'memory'"
                )

    def get_generator(self, store: BaseRecordStore) -> BasePromptGenerator:
        """Get a prompt generator reading templates and presets from *store*.

        Args:
            store: The record store to load templates and presets from.

        Returns:
            A BasePromptGenerator implementation instance.
        """
        return PromptGenerator(
            template_store=store,
            preset_store=store,
            max_prompts=self._settings.generation_max_prompts,
            warn_threshold=self._settings.generation_warn_threshold,
        )

    def clear_cache(self) -> None:
        """Drop the cached in-memory store so the next access starts empty."""
        self._memory_store_cache = None
        logger.debug("Component factory cache cleared")
