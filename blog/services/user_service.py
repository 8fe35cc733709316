"""
User service - CRUD for the User resource.

Username and email uniqueness is enforced by the database; a violation
surfaces as ``ConflictError``.  Destroying a user keeps their articles and
clears the articles' ``user_id``.
"""
import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from blog.cache import cache
from blog.database import atomic
from blog.exceptions import ConflictError, NotFoundError
from blog.models import Article, User
from blog.schemas import FormDescriptor, UserCreate, UserUpdate
from blog.services.forms import build_form
from blog.services.serializers import article_to_dict, user_to_dict
from blog.validators import USER_RULES, validate

logger = logging.getLogger(__name__)

_DUPLICATE_MESSAGE = "A user with this username or email already exists"


async def _load(db: AsyncSession, user_id: int, with_articles: bool = False) -> User:
    q = select(User).where(User.id == user_id).execution_options(populate_existing=True)
    if with_articles:
        q = q.options(selectinload(User.articles))
    user = (await db.execute(q)).scalar_one_or_none()
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    return user


async def _flush_unique(db: AsyncSession) -> None:
    try:
        await db.flush()
    except IntegrityError as exc:
        raise ConflictError(_DUPLICATE_MESSAGE) from exc


async def list_users(db: AsyncSession) -> list[dict]:
    """All users, newest first.  Articles are left out of the list view."""
    q = select(User).order_by(User.created_at.desc(), User.id.desc())
    result = await db.execute(q)
    return [user_to_dict(u) for u in result.scalars().all()]


async def get_user(db: AsyncSession, user_id: int) -> dict:
    """User detail with a summary of the articles they own."""
    user = await _load(db, user_id, with_articles=True)
    data = user_to_dict(user)
    data["articles"] = [article_to_dict(a, with_author=False) for a in user.articles]
    return data


async def find_by_username(db: AsyncSession, username: str) -> User | None:
    return await db.scalar(select(User).where(User.username == username))


async def new_user_form() -> FormDescriptor:
    return build_form("user", "create", "POST", "/users", USER_RULES)


async def edit_user_form(db: AsyncSession, user_id: int) -> FormDescriptor:
    user = await _load(db, user_id)
    return build_form(
        "user", "update", "PUT", f"/users/{user_id}", USER_RULES,
        values={"username": user.username, "email": user.email},
    )


async def create_user(db: AsyncSession, data: UserCreate) -> dict:
    values = data.model_dump()
    validate(values, USER_RULES)

    user = User(username=values["username"], email=values["email"])
    db.add(user)
    await _flush_unique(db)
    logger.info("Created user id=%d username=%s", user.id, user.username)
    return user_to_dict(await _load(db, user.id))


async def update_user(db: AsyncSession, user_id: int, data: UserUpdate) -> dict:
    user = await _load(db, user_id)
    changes = data.model_dump(exclude_unset=True)
    merged = {"username": user.username, "email": user.email}
    merged.update(changes)
    validate(merged, USER_RULES)

    for field, value in changes.items():
        setattr(user, field, value)
    await _flush_unique(db)
    logger.info("Updated user id=%d fields=%s", user_id, sorted(changes))
    # Cached articles embed the author.
    await cache.invalidate_all_articles()
    return user_to_dict(await _load(db, user_id))


async def delete_user(db: AsyncSession, user_id: int) -> int:
    """
    Delete the user and detach their articles.  Returns the number of
    articles whose ``user_id`` was cleared.
    """
    await _load(db, user_id)
    async with atomic(db):
        result = await db.execute(
            update(Article).where(Article.user_id == user_id).values(user_id=None)
        )
        detached = result.rowcount or 0
        await db.execute(delete(User).where(User.id == user_id))
    logger.info("Deleted user id=%d, detached %d article(s)", user_id, detached)
    await cache.invalidate_all_articles()
    return detached
