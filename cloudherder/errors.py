from __future__ import annotations


class DashboardError(ValueError):
    """Base class for dashboard composition failures."""


class InvalidPanelError(DashboardError):
    """Raised when a panel is missing a field or a field is out of range."""


class InvalidSectionError(DashboardError):
    """Raised when the sections handed to the stacker are malformed."""


class InvalidQueryError(DashboardError):
    """Raised when a log query cannot be templated."""


class ConfigError(DashboardError):
    """Raised when deployment configuration is missing or inconsistent."""
