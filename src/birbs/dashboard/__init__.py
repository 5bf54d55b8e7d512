"""Presentation-facing view builders."""

from birbs.dashboard.models import BirdPage, RecentActivity, ViewOptions, ViewResult, ViewState
from birbs.dashboard.service import DashboardService

__all__ = [
    "BirdPage",
    "DashboardService",
    "RecentActivity",
    "ViewOptions",
    "ViewResult",
    "ViewState",
]
