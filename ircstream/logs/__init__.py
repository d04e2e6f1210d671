"""Project logging package.

Contains internal logging utilities (event catalog + EventLogger). Avoid
importing stdlib logging through this package name externally.
"""

from .event_catalog import (  # noqa: F401
    EVENT_TEMPLATES,
    audit_templates,
    load_event_templates,
    reload_event_templates,
)
from .logger import EventLogger, logger  # noqa: F401

__all__ = [
    "EventLogger",
    "logger",
    "EVENT_TEMPLATES",
    "audit_templates",
    "load_event_templates",
    "reload_event_templates",
]
