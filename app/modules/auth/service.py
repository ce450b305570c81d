import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from app.core.errors import (
    AuthError, ConflictError, NotFoundError, PersistenceError, ValidationError
)
from app.core.security import PasswordHasher, TokenService
from app.database.store import CredentialStore, StoreError, UniqueViolation
from app.modules.auth.models import (
    PROFILES_TABLE, SESSIONS_TABLE, USERS_TABLE, USER_PUBLIC_COLUMNS
)
from app.modules.auth.schemas import (
    AuthResponse, CurrentUser, ProfileResponse, ProfileUpdate, ProfileUser,
    SigninRequest, SignupRequest, UserSummary, Outcome
)

logger = logging.getLogger(__name__)

# Same text for "no such user" and "wrong password"
INVALID_CREDENTIALS = "Invalid email or password"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class AuthService:
    def __init__(self, store: CredentialStore, hasher: PasswordHasher, tokens: TokenService):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    def signup(self, data: SignupRequest) -> Outcome[AuthResponse]:
        """Register a user, create their profile row and issue a token"""
        if not data.email or not data.password or not data.name:
            raise ValidationError("Email, password and name are required")

        try:
            existing = self.store.find_one(USERS_TABLE, "email", data.email, columns="id")
        except StoreError as e:
            logger.error(f"Signup lookup failed: {e}")
            raise PersistenceError("Failed to register user", str(e))
        if existing:
            raise ConflictError("Email already registered")

        password_hash = self.hasher.hash(data.password)
        user_id = str(uuid.uuid4())
        try:
            user = self.store.insert_one(USERS_TABLE, {
                "id": user_id,
                "email": data.email,
                "password": password_hash,
                "name": data.name,
                "phone": data.phone or None,
                "created_at": _now_iso(),
            })
        except UniqueViolation:
            # lost a race with a concurrent signup for the same email
            raise ConflictError("Email already registered")
        except StoreError as e:
            logger.error(f"Signup error: {e}")
            raise PersistenceError("Failed to register user", str(e))

        warning = None
        try:
            self.store.insert_one(PROFILES_TABLE, {
                "id": str(uuid.uuid4()),
                "user_id": user_id,
                "avatar": None,
                "created_at": _now_iso(),
            })
        except StoreError as e:
            logger.error(f"Profile creation error for user {user_id}: {e}")
            warning = "Profile record could not be created"

        token = self.tokens.issue(user_id, user["email"])
        response = AuthResponse(
            message="Registration successful",
            user=UserSummary(id=user["id"], email=user["email"], name=user.get("name")),
            token=token,
        )
        return Outcome(response, warning)

    def signin(
        self,
        data: SigninRequest,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Outcome[AuthResponse]:
        """Check credentials, record a session and issue a token"""
        if not data.email or not data.password:
            raise ValidationError("Email and password are required")

        try:
            user = self.store.find_one(USERS_TABLE, "email", data.email)
        except StoreError as e:
            logger.error(f"Signin lookup failed: {e}")
            raise PersistenceError("Failed to sign in", str(e))

        if not user:
            self.hasher.verify_dummy(data.password)
            raise AuthError(INVALID_CREDENTIALS, reason="unknown_email")
        if not self.hasher.verify(data.password, user.get("password")):
            raise AuthError(INVALID_CREDENTIALS, reason="wrong_password")

        token = self.tokens.issue(user["id"], user["email"])

        warning = None
        try:
            self.store.insert_one(SESSIONS_TABLE, {
                "id": str(uuid.uuid4()),
                "user_id": user["id"],
                "ip_address": ip_address,
                "user_agent": user_agent,
                "last_activity": _now_iso(),
            })
        except StoreError as e:
            logger.error(f"Session creation error for user {user['id']}: {e}")
            warning = "Session record could not be created"

        response = AuthResponse(
            message="Login successful",
            user=UserSummary(id=user["id"], email=user["email"], name=user.get("name")),
            token=token,
        )
        return Outcome(response, warning)

    def get_profile(self, identity: CurrentUser) -> ProfileResponse:
        try:
            user = self.store.find_one(USERS_TABLE, "id", identity.id, columns=USER_PUBLIC_COLUMNS)
        except StoreError as e:
            logger.error(f"Profile read failed for user {identity.id}: {e}")
            raise PersistenceError("Failed to load profile", str(e))
        if not user:
            raise NotFoundError("User not found")

        avatar = None
        try:
            profile = self.store.find_one(PROFILES_TABLE, "user_id", identity.id, columns="avatar")
            if profile:
                avatar = profile.get("avatar") or None
        except StoreError as e:
            logger.warning(f"Avatar lookup failed for user {identity.id}: {e}")

        return ProfileResponse(user=ProfileUser(**user, avatar=avatar))

    def update_profile(self, identity: CurrentUser, data: ProfileUpdate) -> None:
        """Apply the non-empty fields; each table is only written when it has changes"""
        user_updates = {}
        if data.name:
            user_updates["name"] = data.name
        if data.phone:
            user_updates["phone"] = data.phone

        if user_updates:
            try:
                self.store.update_by_id(USERS_TABLE, identity.id, user_updates)
            except StoreError as e:
                logger.error(f"User update failed for {identity.id}: {e}")
                raise PersistenceError("Failed to update profile", str(e))

        if data.avatar:
            try:
                updated = self.store.update_by_field(
                    PROFILES_TABLE, "user_id", identity.id, {"avatar": data.avatar}
                )
                if not updated:
                    # profile row was never created at signup
                    self.store.insert_one(PROFILES_TABLE, {
                        "id": str(uuid.uuid4()),
                        "user_id": identity.id,
                        "avatar": data.avatar,
                        "created_at": _now_iso(),
                    })
            except StoreError as e:
                logger.error(f"Avatar update failed for {identity.id}: {e}")
                raise PersistenceError("Failed to update avatar", str(e))

    def logout(self, identity: CurrentUser) -> Outcome[int]:
        """Delete every recorded session of the user.

        The bearer token itself stays valid until it expires.
        """
        try:
            removed = self.store.delete_by_field(SESSIONS_TABLE, "user_id", identity.id)
        except StoreError as e:
            logger.error(f"Session deletion error for user {identity.id}: {e}")
            return Outcome(0, "Sessions could not be cleared")
        return Outcome(removed)
