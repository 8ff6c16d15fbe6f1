"""
Purpose: Central configuration for the route geometry pipeline (single source of truth).
What it does:

Stores all tunable thresholds/caps:

TOLERANCE_DEGREES = 0.0005 (~50 m of deviation at mid-latitudes)

MAX_POINTS = 1000 (stored geometry cap)

REQUEST_TIMEOUT_S = 5 (provider call)

MAX_COORDINATES_PER_REQUEST = 25 (provider limit)

Also resolves environment settings (.env) for scripts: event id and the
document collection path.

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()
EVENT_ID = os.getenv("EVENT_ID", "bajarun2026")


@dataclass(frozen=True)
class PipelinePolicy:
    """
    Central configuration for route generation and rendering.

    Notes:
    - tolerance is in degrees; lower = denser stored geometry, higher = smaller documents.
    - max_points caps the stored path; simplification coarsens until it fits.
    - the same request timeout bounds generation and the renderer's live fetch.
    """

    # --- Simplification ---
    tolerance_degrees: float = 0.0005
    max_points: int = 1000

    # --- Provider ---
    profile: str = "driving"
    request_timeout_s: float = 5.0
    max_coordinates_per_request: int = 25

    def validate(self) -> None:
        """
        Basic sanity checks. Call once at startup if you want.
        """
        if not self.tolerance_degrees >= 0:
            raise ValueError("tolerance_degrees must be >= 0")

        if self.max_points < 2:
            raise ValueError("max_points must be >= 2")

        if self.request_timeout_s <= 0:
            raise ValueError("request_timeout_s must be > 0")

        if self.max_coordinates_per_request < 2:
            raise ValueError("max_coordinates_per_request must be >= 2")

        if not self.profile:
            raise ValueError("profile must be set")


def default_policy() -> PipelinePolicy:
    """
    Convenience factory for the default policy.
    """
    p = PipelinePolicy()
    p.validate()
    return p


def detailed_policy() -> PipelinePolicy:
    """
    Denser geometry (~10 m) for short technical days where switchbacks matter.
    """
    p = PipelinePolicy(tolerance_degrees=0.0001, max_points=3000)
    p.validate()
    return p


def compact_policy() -> PipelinePolicy:
    """
    Coarser geometry (~100 m) for long highway days and the trip overview.
    """
    p = PipelinePolicy(tolerance_degrees=0.001, max_points=400)
    p.validate()
    return p


def collection_path(event_id: str = EVENT_ID) -> str:
    return f"events/{event_id}/routes"
