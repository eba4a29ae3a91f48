"""
Registration, login and session lookup over the users collection.

Session state machine: logged out -> (login) -> logged in -> (logout) ->
logged out. Registering does not log the new user in.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from clubstore.core.errors import ConflictError, InvalidCredentials, NotFound, ValidationError
from clubstore.core.security import verify_password
from clubstore.domain.models import Session, User
from clubstore.repositories.entity_repository import UserRepository
from clubstore.repositories.keyed_store import KeyedStore
from clubstore.services.session_service import clear_session, issue_session, load_session

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
MIN_PASSWORD_LENGTH = 5
PROFILE_FIELDS = ("username", "email")


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.search(email or ""))


class AuthService:
    """Owns the explicit Session value; the UI receives this object instead of a global."""

    def __init__(self, store: KeyedStore, users: Optional[UserRepository] = None):
        self.store = store
        self.users = users or UserRepository(store)
        self.session: Optional[Session] = None

    # -------------------------------------- helpers --------------------------------------
    def _check_email(self, email: str) -> None:
        if not is_valid_email(email):
            raise ValidationError("Please enter a valid email address", ["email"])

    async def _check_unique(self, username: Optional[str], email: Optional[str], *, exclude_id: Optional[str] = None) -> None:
        if username is not None:
            existing = await self.users.find_by_username(username)
            if existing and existing.id != exclude_id:
                raise ConflictError("Username already exists", field="username")
        if email is not None:
            existing = await self.users.find_by_email(email)
            if existing and existing.id != exclude_id:
                raise ConflictError("Email already registered", field="email")

    async def restore(self) -> Optional[Session]:
        """Reload the persisted session pointer (app start)."""
        self.session = await load_session(self.store)
        return self.session

    # -------------------------------------- registration --------------------------------------
    async def register(self, username: str, email: str, password: str) -> User:
        username = (username or "").strip()
        email = (email or "").strip()
        password = password or ""
        blank = [name for name, value in (("username", username), ("email", email), ("password", password.strip())) if not value]
        if blank:
            raise ValidationError("Please fill in all fields", blank)
        self._check_email(email)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long", ["password"])
        await self._check_unique(username, email)
        user = await self.users.save({"username": username, "email": email, "password": password})
        logger.info("Registered user %s", username)
        return user

    # -------------------------------------- login --------------------------------------
    async def login(self, username: str, password: str) -> User:
        user = await self.users.find_by_username((username or "").strip())
        if not user or not verify_password(password, user.password):
            logger.warning("Failed login for %r", (username or "").strip())
            raise InvalidCredentials()
        self.session = await issue_session(self.store, user.id)
        logger.info("User %s logged in", user.username)
        return user

    async def get_current_user(self) -> Optional[User]:
        session = await load_session(self.store)
        self.session = session
        if session is None:
            return None
        try:
            return await self.users.get_by_id(session.user_id)
        except NotFound:
            return None

    async def logout(self) -> None:
        await clear_session(self.store)
        if self.session is not None:
            logger.info("User %s logged out", self.session.user_id)
        self.session = None

    # -------------------------------------- profile --------------------------------------
    async def update_profile(self, user_id: str, **changes: Any) -> User:
        unknown = sorted(set(changes) - set(PROFILE_FIELDS))
        if unknown:
            raise ValidationError(f"Cannot edit field(s): {', '.join(unknown)}", unknown)
        await self.users.get_by_id(user_id)
        cleaned = {name: (value or "").strip() for name, value in changes.items()}
        blank = [name for name, value in cleaned.items() if not value]
        if blank:
            raise ValidationError("Please fill in all fields", blank)
        if "email" in cleaned:
            self._check_email(cleaned["email"])
        await self._check_unique(cleaned.get("username"), cleaned.get("email"), exclude_id=user_id)
        return await self.users.update(user_id, cleaned)
