from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from blog.database import get_db
from blog.dependencies import PaginationParams
from blog.schemas import (
    CommentCreate,
    CommentResponse,
    CommentUpdate,
    FormDescriptor,
    PaginatedResponse,
)
from blog.services import comment_service

router = APIRouter(prefix="/articles/{article_id:int}/comments", tags=["comments"])


@router.get("", response_model=PaginatedResponse)
async def index_comments(
    article_id: int,
    pagination: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.list_comments(
        db, article_id, pagination.page, pagination.page_size
    )


@router.get("/new", response_model=FormDescriptor)
async def new_comment(article_id: int, db: AsyncSession = Depends(get_db)):
    return await comment_service.new_comment_form(db, article_id)


@router.post("", status_code=201, response_model=CommentResponse)
async def create_comment(article_id: int, data: CommentCreate, db: AsyncSession = Depends(get_db)):
    return await comment_service.create_comment(db, article_id, data)


@router.get("/{comment_id:int}", response_model=CommentResponse)
async def show_comment(article_id: int, comment_id: int, db: AsyncSession = Depends(get_db)):
    return await comment_service.get_comment(db, article_id, comment_id)


@router.get("/{comment_id:int}/edit", response_model=FormDescriptor)
async def edit_comment(article_id: int, comment_id: int, db: AsyncSession = Depends(get_db)):
    return await comment_service.edit_comment_form(db, article_id, comment_id)


@router.api_route("/{comment_id:int}", methods=["PUT", "PATCH"], response_model=CommentResponse)
async def update_comment(
    article_id: int,
    comment_id: int,
    data: CommentUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.update_comment(db, article_id, comment_id, data)


@router.delete("/{comment_id:int}", status_code=204)
async def destroy_comment(article_id: int, comment_id: int, db: AsyncSession = Depends(get_db)):
    await comment_service.delete_comment(db, article_id, comment_id)
