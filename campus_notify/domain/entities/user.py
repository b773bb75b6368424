"""Domain entity representing a user from the campus directory."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class DirectoryUser:
    """Directory attributes used for authentication and audience targeting."""

    id: int | None
    name: str
    email: str
    branch_id: str | None
    semester: int | None
    year: int | None
    is_admin: bool = False
    is_active: bool = True
    created_at: datetime | None = None
