"""
Mutation-driven cache invalidation.

Called by any code path that changes SmartMenu settings upstream. The whole
cache is dropped: there is no per-entity invalidation, one mutation forces
the next read to refetch everything.
"""

from collections.abc import Iterable

import structlog

from ...models import MutableField, SettingsMutation
from .cache import CacheStore

logger = structlog.get_logger(__name__)


class InvalidationController:
    """Forces the next get_settings() to bypass the cache after a mutation."""

    def __init__(self, cache: CacheStore):
        self._cache = cache

    def invalidate_on_mutation(
        self,
        entity_id: str,
        changed_fields: Iterable[str | MutableField],
    ) -> SettingsMutation:
        """
        Validate a mutation report and invalidate the cache.

        Args:
            entity_id: Id of the mutated entity
            changed_fields: Field names (snake_case or camelCase) that changed

        Returns:
            The validated mutation

        Raises:
            ValidationError: Blank id, no fields, or a field that is not mutable
        """
        mutation = SettingsMutation.from_fields(entity_id, changed_fields)
        return self.apply(mutation)

    def apply(self, mutation: SettingsMutation) -> SettingsMutation:
        """Invalidate the timestamp, then bump the version."""
        self._cache.invalidate()
        cache_version = self._cache.bump_version()

        logger.info(
            "cache_invalidated_for_mutation",
            entity_id=mutation.entity_id,
            changes=mutation.field_names,
            cache_version=cache_version,
        )
        return mutation
