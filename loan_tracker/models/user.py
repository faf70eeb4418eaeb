"""User profile model."""

from dataclasses import dataclass
from datetime import datetime

from loan_tracker.models.enums import Role


@dataclass
class UserProfile:
    """Dashboard user, optionally linked to an authentication user."""

    name: str = ""
    email: str = ""
    role: Role = Role.MANAGER
    user_id: str | None = None  # Linked auth user id
    created_at: datetime | None = None
    updated_at: datetime | None = None
    id: str | None = None
