"""
Session service - login state kept in the signed cookie session.

Only the user's id is stored.  No credential check is made: a login names
an existing user and nothing more.
"""
import logging
from typing import MutableMapping

from sqlalchemy.ext.asyncio import AsyncSession

from blog.exceptions import NotFoundError
from blog.models import User
from blog.schemas import FormDescriptor
from blog.services import user_service
from blog.services.forms import build_form
from blog.services.serializers import user_to_dict
from blog.validators import presence

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"


async def new_session_form() -> FormDescriptor:
    return build_form("session", "create", "POST", "/sessions", [presence("username")])


async def login(db: AsyncSession, session: MutableMapping, username: str) -> dict:
    user = await user_service.find_by_username(db, username)
    if user is None:
        raise NotFoundError(f"No user named {username!r}")
    session[SESSION_USER_KEY] = user.id
    logger.info("User id=%d logged in", user.id)
    return user_to_dict(user)


def logout(session: MutableMapping) -> bool:
    """Clear the login; returns whether anyone was logged in."""
    user_id = session.pop(SESSION_USER_KEY, None)
    if user_id is not None:
        logger.info("User id=%d logged out", user_id)
    return user_id is not None


async def current_user(db: AsyncSession, session: MutableMapping) -> User | None:
    user_id = session.get(SESSION_USER_KEY)
    if user_id is None:
        return None
    user = await db.get(User, user_id)
    if user is None:
        # The user was deleted after logging in.
        session.pop(SESSION_USER_KEY, None)
    return user
