"""Redis side of the session state.

One live refresh ``jti`` per user, plus a blacklist of logged-out access
token ``jti`` values that expires together with the tokens themselves.
"""
import logging
from typing import Any, Optional

from tuchonga.core.cache.redis import redis_client
from tuchonga.core.security.jwt import exp_seconds_left, token_user_id

logger = logging.getLogger(__name__)

KEY_PREFIX = "tuchonga"


def refresh_key(user_id: int) -> str:
    return f"{KEY_PREFIX}:refresh:{user_id}"


def blacklist_key(jti: str) -> str:
    return f"{KEY_PREFIX}:bl:{jti}"


def remember_refresh(refresh_payload: dict[str, Any]) -> None:
    """Make ``refresh_payload`` the only refresh token accepted for its user."""
    user_id = token_user_id(refresh_payload)
    ttl = max(1, exp_seconds_left(refresh_payload))
    redis_client.set(refresh_key(user_id), refresh_payload["jti"], ex=ttl)


def get_refresh_jti(user_id: int) -> Optional[str]:
    return redis_client.get(refresh_key(user_id))


def is_current_refresh(refresh_payload: dict[str, Any]) -> bool:
    saved = get_refresh_jti(token_user_id(refresh_payload))
    return saved is not None and saved == refresh_payload["jti"]


def delete_refresh(user_id: int) -> None:
    redis_client.delete(refresh_key(user_id))


def blacklist_access(access_payload: dict[str, Any]) -> None:
    # already expired tokens are rejected on decode
    ttl = exp_seconds_left(access_payload)
    if ttl <= 0:
        return
    redis_client.set(blacklist_key(access_payload["jti"]), "1", ex=ttl)
    logger.debug("access token %s blacklisted for %ss", access_payload["jti"], ttl)


def is_blacklisted(jti: str) -> bool:
    return redis_client.exists(blacklist_key(jti)) == 1
