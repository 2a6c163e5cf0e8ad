"""
Database Models

Only the declarative base lives here. Feature models are imported from
their features/ modules; importing them here would be circular because
every feature model imports app.models.base.
"""

from app.models.base import Base


def load_all_models() -> None:
    """Import every feature model so it is registered on Base.metadata."""
    from app.features.users.models import User  # noqa: F401
    from app.features.activities.models import Activity  # noqa: F401
    from app.features.challenges.models import Challenge  # noqa: F401
    from app.features.wellness.models import WellnessLog  # noqa: F401
    from app.features.feed.models import FeedMessage  # noqa: F401


__all__ = ["Base", "load_all_models"]
