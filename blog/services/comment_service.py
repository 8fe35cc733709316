"""
Comment service - CRUD for comments nested under an article.

Every lookup is scoped by ``article_id``: a comment id that exists but
belongs to another article is reported as not found.  Writes invalidate
the parent article's cached detail view, which embeds its comments.
"""
import logging
import math

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blog.cache import cache
from blog.exceptions import NotFoundError
from blog.models import Article, Comment
from blog.schemas import CommentCreate, CommentUpdate, FormDescriptor, PaginatedResponse
from blog.services.forms import build_form
from blog.services.serializers import comment_to_dict
from blog.validators import COMMENT_RULES, validate

logger = logging.getLogger(__name__)

_EXTRA_FIELDS = {"body": {"type": "text"}}


async def _require_article(db: AsyncSession, article_id: int) -> None:
    if await db.scalar(select(Article.id).where(Article.id == article_id)) is None:
        raise NotFoundError(f"Article {article_id} not found")


async def _load(db: AsyncSession, article_id: int, comment_id: int) -> Comment:
    await _require_article(db, article_id)
    q = (
        select(Comment)
        .where(Comment.id == comment_id, Comment.article_id == article_id)
        .execution_options(populate_existing=True)
    )
    comment = (await db.execute(q)).scalar_one_or_none()
    if comment is None:
        raise NotFoundError(f"Comment {comment_id} not found on article {article_id}")
    return comment


async def list_comments(
    db: AsyncSession,
    article_id: int,
    page: int = 1,
    page_size: int = 20,
) -> PaginatedResponse:
    """Comments of one article, oldest first (reading order)."""
    await _require_article(db, article_id)
    total: int = (
        await db.execute(
            select(func.count()).select_from(Comment).where(Comment.article_id == article_id)
        )
    ).scalar_one()
    q = (
        select(Comment)
        .where(Comment.article_id == article_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    comments = (await db.execute(q)).scalars().all()
    return PaginatedResponse(
        items=[comment_to_dict(c) for c in comments],
        total=total,
        page=page,
        page_size=page_size,
        pages=math.ceil(total / page_size) if total > 0 else 0,
    )


async def get_comment(db: AsyncSession, article_id: int, comment_id: int) -> dict:
    return comment_to_dict(await _load(db, article_id, comment_id))


async def new_comment_form(db: AsyncSession, article_id: int) -> FormDescriptor:
    await _require_article(db, article_id)
    return build_form(
        "comment", "create", "POST", f"/articles/{article_id}/comments",
        COMMENT_RULES, _EXTRA_FIELDS,
    )


async def edit_comment_form(db: AsyncSession, article_id: int, comment_id: int) -> FormDescriptor:
    comment = await _load(db, article_id, comment_id)
    return build_form(
        "comment", "update", "PUT", f"/articles/{article_id}/comments/{comment_id}",
        COMMENT_RULES, _EXTRA_FIELDS,
        values={"commenter": comment.commenter, "body": comment.body},
    )


async def create_comment(db: AsyncSession, article_id: int, data: CommentCreate) -> dict:
    await _require_article(db, article_id)
    values = data.model_dump()
    validate(values, COMMENT_RULES)

    comment = Comment(commenter=values["commenter"], body=values["body"], article_id=article_id)
    db.add(comment)
    await db.flush()
    logger.info("Created comment id=%d on article id=%d", comment.id, article_id)

    await cache.invalidate_article(article_id)
    return comment_to_dict(await _load(db, article_id, comment.id))


async def update_comment(
    db: AsyncSession, article_id: int, comment_id: int, data: CommentUpdate
) -> dict:
    comment = await _load(db, article_id, comment_id)
    changes = data.model_dump(exclude_unset=True)
    merged = {"commenter": comment.commenter, "body": comment.body}
    merged.update(changes)
    validate(merged, COMMENT_RULES)

    for field, value in changes.items():
        setattr(comment, field, value)
    await db.flush()
    logger.info("Updated comment id=%d on article id=%d", comment_id, article_id)

    await cache.invalidate_article(article_id)
    return comment_to_dict(await _load(db, article_id, comment_id))


async def delete_comment(db: AsyncSession, article_id: int, comment_id: int) -> None:
    comment = await _load(db, article_id, comment_id)
    await db.delete(comment)
    await db.flush()
    logger.info("Deleted comment id=%d from article id=%d", comment_id, article_id)
    await cache.invalidate_article(article_id)
