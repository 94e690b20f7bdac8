"""
Infrastructure Package.

Provides the browser tab pool used by the site link checker.
"""

from .browser_pool import (
    PagePool,
    PoolStatus,
    TabMetrics,
)

__all__ = [
    # Tab Pool
    "PagePool",
    "PoolStatus",
    "TabMetrics",
]
