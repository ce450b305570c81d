"""
Core dependencies for route protection
"""

from datetime import timedelta
from functools import lru_cache
from typing import Optional
import logging

from fastapi import Depends, Header, Request

from app.config.settings import settings
from app.core.errors import AuthError, PersistenceError
from app.core.security import PasswordHasher, TokenService
from app.database.store import CredentialStore, StoreError
from app.database.supabase_client import get_store
from app.modules.auth.models import USERS_TABLE
from app.modules.auth.schemas import CurrentUser
from app.modules.auth.service import AuthService

logger = logging.getLogger(__name__)

# One message for every rejected bearer token, whatever the cause
UNAUTHENTICATED = "Invalid or missing authentication token"


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


@lru_cache
def get_token_service() -> TokenService:
    return TokenService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(days=settings.token_ttl_days),
    )


def get_auth_service(
    store: CredentialStore = Depends(get_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(store, hasher, tokens)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an 'Authorization: Bearer <token>' value, or None."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token or " " in token:
        return None
    return token


def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    store: CredentialStore = Depends(get_store),
    tokens: TokenService = Depends(get_token_service),
) -> CurrentUser:
    """Authorization gate: extract, verify, resolve, attach"""
    token = extract_bearer_token(authorization)
    if token is None:
        logger.info("Request rejected: missing or malformed Authorization header")
        raise AuthError(UNAUTHENTICATED, reason="missing_token")

    claims = tokens.verify(token)
    if claims is None:
        raise AuthError(UNAUTHENTICATED, reason="invalid_token")

    try:
        user = store.find_one(USERS_TABLE, "id", claims.sub, columns="id, email, name")
    except StoreError as e:
        logger.error(f"Identity lookup failed for {claims.sub}: {e}")
        raise PersistenceError("Failed to resolve user", str(e))
    if not user:
        logger.info(f"Request rejected: token subject {claims.sub} no longer exists")
        raise AuthError(UNAUTHENTICATED, reason="user_not_found")

    current_user = CurrentUser(**user)
    request.state.user = current_user
    return current_user
