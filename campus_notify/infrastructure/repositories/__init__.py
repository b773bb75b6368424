"""Repository implementations for infrastructure layer."""

from .delivery_repository import DeliveryRepository
from .exam_repository import ExamRepository
from .notification_preference_repository import NotificationPreferenceRepository
from .notification_repository import NotificationRepository
from .user_repository import UserRepository

__all__ = [
    "DeliveryRepository",
    "ExamRepository",
    "NotificationPreferenceRepository",
    "NotificationRepository",
    "UserRepository",
]
