"""Dashboard user profiles and their authentication accounts."""

from __future__ import annotations

from dataclasses import replace

from loan_tracker.backend import AdminGateway, StorageBackend
from loan_tracker.backend.admin import ADMIN_NOT_CONFIGURED_MESSAGE
from loan_tracker.exceptions import BackendError, BackendNotConfiguredError, EntityNotFoundError, ValidationError
from loan_tracker.logging import get_logger
from loan_tracker.models import Role, UserProfile, sort_users
from loan_tracker.result import ErrorKind, MutationResult
from loan_tracker.store.data import run_mutation, splice

logger = get_logger(__name__)


def validate_profile(profile: UserProfile) -> None:
    if not profile.name or not profile.name.strip():
        raise ValidationError("User: name is required")
    if not profile.email or "@" not in profile.email:
        raise ValidationError(f"User: invalid e-mail {profile.email!r}")
    if not isinstance(profile.role, Role):
        raise ValidationError(f"User: unknown role {profile.role!r}")


class UserStore:
    """User profiles, with linked authentication users when an admin key is set.

    Parameters
    ----------
    backend : StorageBackend
        Storage holding the ``user_profiles`` table.
    admin : AdminGateway | None
        Administration API; ``None`` or unconfigured means profiles are
        managed without touching authentication users, and invitations fail
        with ``ErrorKind.NOT_CONFIGURED``.
    """

    def __init__(self, backend: StorageBackend, admin: AdminGateway | None = None) -> None:
        self.backend = backend
        self.admin = admin
        self.users: list[UserProfile] = []
        self.error: str | None = None

    @property
    def can_manage_accounts(self) -> bool:
        return self.admin is not None and self.admin.is_configured

    def find_user(self, profile_id: str) -> UserProfile | None:
        return next((u for u in self.users if u.id == profile_id), None)

    def refresh(self) -> MutationResult[None]:
        try:
            users = self.backend.user_profiles.list()
        except BackendError as exc:
            self.error = str(exc)
            logger.error("Failed to load users: %s", exc)
            return MutationResult.fail(str(exc), ErrorKind.BACKEND)
        self.users = sort_users(users)
        self.error = None
        return MutationResult.ok()

    def save_user(self, profile: UserProfile, password: str | None = None) -> MutationResult[UserProfile]:
        """Create or update a profile.

        With an admin key, the linked authentication user is updated, or
        created when the profile has none and a password is given.
        """

        def operation() -> UserProfile:
            validate_profile(profile)
            record = profile
            created_user_id = None
            if self.can_manage_accounts:
                if profile.user_id:
                    self.admin.update_user(profile.user_id, profile.email, profile.name, password)
                elif password:
                    account = self.admin.create_user(profile.email, password, profile.name)
                    created_user_id = account.id
                    record = replace(profile, user_id=account.id)

            try:
                stored = self.backend.user_profiles.upsert(record)
            except BackendError:
                if created_user_id:
                    self._discard_account(created_user_id)
                raise
            self.users = splice(self.users, stored, sort_users)
            return stored

        return run_mutation("save user", operation)

    def _discard_account(self, user_id: str) -> None:
        try:
            self.admin.delete_user(user_id)
        except BackendError as exc:
            logger.error("Could not remove auth user %s: %s", user_id, exc)

    def delete_user(self, profile: UserProfile) -> MutationResult[None]:
        """Delete a profile, removing its authentication user first."""

        def operation() -> None:
            if profile.id is None or self.find_user(profile.id) is None:
                raise EntityNotFoundError(f"User {profile.id} not found")
            if profile.user_id and self.can_manage_accounts:
                self.admin.delete_user(profile.user_id)
            self.backend.user_profiles.delete(profile.id)
            self.users = [u for u in self.users if u.id != profile.id]

        return run_mutation("delete user", operation)

    def invite_user(self, name: str, email: str, role: Role = Role.MANAGER) -> MutationResult[UserProfile]:
        """Send an invitation e-mail and record the invited user's profile."""

        def operation() -> UserProfile:
            profile = UserProfile(name=name, email=email, role=role)
            validate_profile(profile)
            if not self.can_manage_accounts:
                raise BackendNotConfiguredError(ADMIN_NOT_CONFIGURED_MESSAGE)
            account = self.admin.invite_user(email, {"name": name, "role": role.value})
            stored = self.backend.user_profiles.upsert(replace(profile, user_id=account.id or None))
            self.users = splice(self.users, stored, sort_users)
            logger.info("Invited %s as %s", email, role.value)
            return stored

        return run_mutation("invite user", operation)
