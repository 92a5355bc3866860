"""
SkillSwap – SQLAlchemy ORM models package.

Imports all model classes so the app can create every table
through a single ``import skillswap.models``.
"""

from skillswap.models.skill import Skill, user_skills_offered, user_skills_wanted  # noqa: F401
from skillswap.models.user import User, UserRole                                    # noqa: F401
from skillswap.models.swap_request import SwapRequest, SwapStatus                   # noqa: F401
from skillswap.models.rating import Rating                                          # noqa: F401
from skillswap.models.notification import Notification, NotificationType            # noqa: F401
from skillswap.models.message_channel import MessageChannel                         # noqa: F401
from skillswap.models.message import Message                                        # noqa: F401
from skillswap.models.availability import AvailabilitySlot                          # noqa: F401
