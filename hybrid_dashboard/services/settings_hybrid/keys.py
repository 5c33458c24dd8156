"""
Persisted key layout for the hybrid settings cache.

Four keys live under one namespace:

    {namespace}_last_fetch      epoch milliseconds, integer string
    {namespace}_cache_version   monotonically increasing integer string
    {namespace}_entities        JSON array of EntitySettings
    {namespace}_metrics         JSON array of QuarterlyMetric
"""


class CacheKeys:
    """Key generators for the hybrid settings cache."""

    DEFAULT_NAMESPACE = "smartmenu_hybrid"
    DEFAULT_VERSION = "1"

    @staticmethod
    def last_fetch(namespace: str = DEFAULT_NAMESPACE) -> str:
        return f"{namespace}_last_fetch"

    @staticmethod
    def cache_version(namespace: str = DEFAULT_NAMESPACE) -> str:
        return f"{namespace}_cache_version"

    @staticmethod
    def entities(namespace: str = DEFAULT_NAMESPACE) -> str:
        return f"{namespace}_entities"

    @staticmethod
    def metrics(namespace: str = DEFAULT_NAMESPACE) -> str:
        return f"{namespace}_metrics"

    @staticmethod
    def all(namespace: str = DEFAULT_NAMESPACE) -> list[str]:
        """All four keys, in the order clear() removes them."""
        return [
            CacheKeys.last_fetch(namespace),
            CacheKeys.cache_version(namespace),
            CacheKeys.entities(namespace),
            CacheKeys.metrics(namespace),
        ]
