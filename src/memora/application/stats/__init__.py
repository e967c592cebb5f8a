# Application Stats Package
from .metrics_calculator import classify, review_breakdown, status_counts
from .service import Dashboard, StatsService

__all__ = ["classify", "review_breakdown", "status_counts", "Dashboard", "StatsService"]
