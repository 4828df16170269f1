"""
Activity log storage.

- Payload classification into email/scraper shapes
- Capacity-bounded, newest-first in-memory store
- AND-ed query filters with full-record text search
"""

from .memory import ActivityLogStore, CAPACITY
from .classify import build_event, is_email_shaped, is_scraper_shaped
from .filters import apply_filter, build_predicates

__all__ = [
    "ActivityLogStore",
    "CAPACITY",
    "build_event",
    "is_email_shaped",
    "is_scraper_shaped",
    "apply_filter",
    "build_predicates",
]
