"""Exceptions raised by the placement engine and session.

Every condition here is locally recoverable: the session guarantees that
no state was mutated when one of these is raised, so callers can show the
message and carry on.
"""

from __future__ import annotations


class BayPlanError(Exception):
    """Base class for recoverable load-planning errors."""


class BayConfigError(BayPlanError, ValueError):
    """Bay length missing, non-numeric or outside the allowed range."""


class BayNotConfiguredError(BayPlanError):
    """A placement operation was attempted before a bay was set up."""


class PlacementInfeasibleError(BayPlanError):
    """A tire is wider than the bay and cannot be placed explicitly."""

    def __init__(self, diameter_mm: float, bay_width_mm: float) -> None:
        super().__init__(
            f"Tire diameter {diameter_mm:g}mm exceeds bay width "
            f"{bay_width_mm:g}mm and cannot be placed"
        )
        self.diameter_mm = diameter_mm
        self.bay_width_mm = bay_width_mm


class CatalogLookupError(BayPlanError, KeyError):
    """No catalog entry exists for the requested code."""

    def __init__(self, code: str) -> None:
        super().__init__(code)
        self.code = code

    def __str__(self) -> str:
        return f"No catalog entry for product code '{self.code}'"


class ReplicationRejectedError(BayPlanError):
    """Replication of a tire outside the bay, or with no copies requested."""
