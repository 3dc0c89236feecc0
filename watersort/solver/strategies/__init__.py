"""
Strategies Package - Concrete strategy implementations.

Import this module to register all built-in strategies.
"""

from .bucket_search import BucketSearchStrategy
from .breadth_first import BreadthFirstStrategy

__all__ = [
    "BucketSearchStrategy",
    "BreadthFirstStrategy",
]
