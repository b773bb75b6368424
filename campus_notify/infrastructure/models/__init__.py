"""ORM models used by the application infrastructure."""

from .exam import ExamModel
from .notification import DeliveryModel, NotificationModel
from .notification_preference import NotificationPreferenceModel
from .user import UserModel

__all__ = [
    "ExamModel",
    "DeliveryModel",
    "NotificationModel",
    "NotificationPreferenceModel",
    "UserModel",
]
