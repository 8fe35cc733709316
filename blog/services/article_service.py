"""
Article service - business logic for the Article resource.

- Every write path runs ``validate(values, ARTICLE_RULES)`` before touching
  the session, so a rejected title leaves nothing to roll back.
- Deleting an article removes its comments with an explicit bulk DELETE
  inside ``atomic()``; the relationship declares no ORM cascade.
- Index and show reads go through the Redis cache-aside layer; every write
  invalidates the list pages and the article's detail entry.
"""
import logging
import math

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from blog.cache import article_detail_key, article_list_key, cache
from blog.config import settings
from blog.database import atomic
from blog.exceptions import NotFoundError, ValidationError
from blog.models import Article, Comment, User
from blog.schemas import ArticleCreate, ArticleUpdate, FormDescriptor, PaginatedResponse
from blog.services.forms import build_form
from blog.services.serializers import article_detail_to_dict, article_to_dict
from blog.validators import ARTICLE_RULES, validate

logger = logging.getLogger(__name__)

_EXTRA_FIELDS = {"body": {"type": "text"}, "user_id": {"type": "integer"}}


async def _load(db: AsyncSession, article_id: int) -> Article:
    q = (
        select(Article)
        .where(Article.id == article_id)
        .options(joinedload(Article.author), selectinload(Article.comments))
        .execution_options(populate_existing=True)
    )
    article = (await db.execute(q)).unique().scalar_one_or_none()
    if article is None:
        raise NotFoundError(f"Article {article_id} not found")
    return article


async def _check_author(db: AsyncSession, user_id: int | None) -> None:
    if user_id is None:
        return
    if await db.get(User, user_id) is None:
        raise ValidationError({"user_id": ["must exist"]})


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

async def list_articles(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 20,
) -> PaginatedResponse:
    """Return one page of articles, newest first."""
    key = article_list_key(page, page_size)
    cached = await cache.get(key)
    if cached:
        return PaginatedResponse(**cached)

    total: int = (await db.execute(select(func.count()).select_from(Article))).scalar_one()
    q = (
        select(Article)
        .options(joinedload(Article.author))
        .order_by(Article.created_at.desc(), Article.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    articles = (await db.execute(q)).unique().scalars().all()

    response = PaginatedResponse(
        items=[article_to_dict(a) for a in articles],
        total=total,
        page=page,
        page_size=page_size,
        pages=math.ceil(total / page_size) if total > 0 else 0,
    )
    await cache.set(key, response.model_dump(), ttl=settings.CACHE_TTL_LIST)
    return response


async def get_article(db: AsyncSession, article_id: int) -> dict:
    """Return the article with its author and comments, or raise NotFoundError."""
    key = article_detail_key(article_id)
    cached = await cache.get(key)
    if cached:
        return cached

    data = article_detail_to_dict(await _load(db, article_id))
    await cache.set(key, data, ttl=settings.CACHE_TTL_DETAIL)
    return data


async def new_article_form() -> FormDescriptor:
    return build_form("article", "create", "POST", "/articles", ARTICLE_RULES, _EXTRA_FIELDS)


async def edit_article_form(db: AsyncSession, article_id: int) -> FormDescriptor:
    article = await _load(db, article_id)
    return build_form(
        "article",
        "update",
        "PUT",
        f"/articles/{article_id}",
        ARTICLE_RULES,
        _EXTRA_FIELDS,
        values={"title": article.title, "body": article.body, "user_id": article.user_id},
    )


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

async def create_article(
    db: AsyncSession,
    data: ArticleCreate,
    current_user_id: int | None = None,
) -> dict:
    """
    Validate and insert a new article.

    ``user_id`` defaults to *current_user_id* (the logged-in user) when the
    payload leaves it out.
    """
    values = data.model_dump()
    if values["user_id"] is None:
        values["user_id"] = current_user_id
    validate(values, ARTICLE_RULES)
    await _check_author(db, values["user_id"])

    article = Article(title=values["title"], body=values["body"], user_id=values["user_id"])
    db.add(article)
    await db.flush()
    logger.info("Created article id=%d user_id=%s", article.id, article.user_id)

    await cache.invalidate_article()
    return article_detail_to_dict(await _load(db, article.id))


async def update_article(db: AsyncSession, article_id: int, data: ArticleUpdate) -> dict:
    """
    Apply the fields present in *data* to the article.

    The merged record is validated as a whole, so clearing the title or
    shortening it below the minimum is rejected the same way as on create.
    """
    article = await _load(db, article_id)
    changes = data.model_dump(exclude_unset=True)
    merged = {"title": article.title, "body": article.body, "user_id": article.user_id}
    merged.update(changes)
    validate(merged, ARTICLE_RULES)
    if "user_id" in changes:
        await _check_author(db, changes["user_id"])

    for field, value in changes.items():
        setattr(article, field, value)
    await db.flush()
    logger.info("Updated article id=%d fields=%s", article_id, sorted(changes))

    await cache.invalidate_article(article_id)
    return article_detail_to_dict(await _load(db, article_id))


async def delete_article(db: AsyncSession, article_id: int) -> int:
    """
    Delete the article and every comment attached to it.

    Both DELETE statements run in one ``atomic`` block: either the article
    and all of its comments are gone, or neither is.  Returns the number
    of comments removed.
    """
    exists = await db.scalar(select(Article.id).where(Article.id == article_id))
    if exists is None:
        raise NotFoundError(f"Article {article_id} not found")

    async with atomic(db):
        result = await db.execute(delete(Comment).where(Comment.article_id == article_id))
        removed = result.rowcount or 0
        await db.execute(delete(Article).where(Article.id == article_id))

    logger.info("Deleted article id=%d with %d comment(s)", article_id, removed)
    await cache.invalidate_article(article_id)
    return removed
