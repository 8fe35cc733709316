from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from blog.database import get_db
from blog.dependencies import PaginationParams, get_current_user
from blog.models import User
from blog.schemas import (
    ArticleCreate,
    ArticleDetail,
    ArticleUpdate,
    FormDescriptor,
    PaginatedResponse,
)
from blog.services import article_service

router = APIRouter(prefix="/articles", tags=["articles"])


@router.get("", response_model=PaginatedResponse)
async def index_articles(
    pagination: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.list_articles(db, pagination.page, pagination.page_size)


@router.get("/new", response_model=FormDescriptor)
async def new_article():
    return await article_service.new_article_form()


@router.post("", status_code=201, response_model=ArticleDetail)
async def create_article(
    data: ArticleCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    user_id = current_user.id if current_user else None
    return await article_service.create_article(db, data, current_user_id=user_id)


@router.get("/{article_id:int}", response_model=ArticleDetail)
async def show_article(article_id: int, db: AsyncSession = Depends(get_db)):
    return await article_service.get_article(db, article_id)


@router.get("/{article_id:int}/edit", response_model=FormDescriptor)
async def edit_article(article_id: int, db: AsyncSession = Depends(get_db)):
    return await article_service.edit_article_form(db, article_id)


@router.api_route("/{article_id:int}", methods=["PUT", "PATCH"], response_model=ArticleDetail)
async def update_article(article_id: int, data: ArticleUpdate, db: AsyncSession = Depends(get_db)):
    return await article_service.update_article(db, article_id, data)


@router.delete("/{article_id:int}", status_code=204)
async def destroy_article(article_id: int, db: AsyncSession = Depends(get_db)):
    await article_service.delete_article(db, article_id)
