"""Structured log event types.

Event naming convention: ``<area>.<action>[.<outcome>]`` so that log queries
can filter on a prefix (``scan.*``, ``store.*``, ``analytics.*``).
"""

from enum import Enum


class LogEvent(str, Enum):
    """Typed log event names for structured logging."""

    # ========== Scan Events ==========
    SCAN_ACCEPTED = "scan.accepted"
    """Checkpoint completion recorded."""

    SCAN_ALREADY_COMPLETED = "scan.already_completed"
    """Duplicate scan rejected; prior values returned to the caller."""

    SCAN_NOT_FOUND = "scan.not_found"
    """Scan for an unknown student id."""

    SCAN_RACE_LOST = "scan.race_lost"
    """Conditional write found the checkpoint already done by a concurrent scan."""

    VISITOR_COUNT_UPDATED = "scan.visitor_count.updated"
    VISITOR_COUNT_REJECTED = "scan.visitor_count.rejected"

    # ========== Analytics Events ==========
    ANALYTICS_VIEW_COMPUTED = "analytics.view.computed"
    """An aggregation view finished its full scan."""

    ANALYTICS_CONTRIBUTION_SKIPPED = "analytics.contribution.skipped"
    """A single record contribution was dropped (unparsable timestamp, missing attribution)."""

    # ========== Store Events ==========
    STORE_UNAVAILABLE = "store.unavailable"
    """Record store read or write failed."""

    STORE_SCRIPT_APPLIED = "store.script.applied"
    """schema.sql or seed.sql executed against the configured database."""

    # ========== App Events ==========
    APP_STARTUP = "app.startup"
    """Startup step finished (schema applied, seed loaded, settings selected)."""

    # ========== API Events ==========
    API_REQUEST_REJECTED = "api.request.rejected"
    """Request rejected before reaching the store (invalid input)."""
