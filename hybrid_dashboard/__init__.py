"""
Hybrid dashboard backend: SmartMenu settings and quarterly analytics served
from one cache over two GraphQL sources.
"""

__version__ = "0.1.0"
