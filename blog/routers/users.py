from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from blog.database import get_db
from blog.schemas import FormDescriptor, UserCreate, UserDetail, UserResponse, UserUpdate
from blog.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def index_users(db: AsyncSession = Depends(get_db)):
    return await user_service.list_users(db)


# Also served at GET /signup.
@router.get("/new", response_model=FormDescriptor)
async def new_user():
    return await user_service.new_user_form()


@router.post("", status_code=201, response_model=UserResponse)
async def create_user(data: UserCreate, db: AsyncSession = Depends(get_db)):
    return await user_service.create_user(db, data)


@router.get("/{user_id:int}", response_model=UserDetail)
async def show_user(user_id: int, db: AsyncSession = Depends(get_db)):
    return await user_service.get_user(db, user_id)


@router.get("/{user_id:int}/edit", response_model=FormDescriptor)
async def edit_user(user_id: int, db: AsyncSession = Depends(get_db)):
    return await user_service.edit_user_form(db, user_id)


@router.api_route("/{user_id:int}", methods=["PUT", "PATCH"], response_model=UserResponse)
async def update_user(user_id: int, data: UserUpdate, db: AsyncSession = Depends(get_db)):
    return await user_service.update_user(db, user_id, data)


@router.delete("/{user_id:int}", status_code=204)
async def destroy_user(user_id: int, db: AsyncSession = Depends(get_db)):
    await user_service.delete_user(db, user_id)
