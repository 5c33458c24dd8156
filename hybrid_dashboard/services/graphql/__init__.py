"""
GraphQL transport and query documents for the upstream services.
"""

from .client import GraphQLClient
from .queries import QUARTERLY_METRICS, SMARTMENU_SETTINGS_BASIC

__all__ = ["GraphQLClient", "QUARTERLY_METRICS", "SMARTMENU_SETTINGS_BASIC"]
