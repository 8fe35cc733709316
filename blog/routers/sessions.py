from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from blog.database import get_db
from blog.schemas import FormDescriptor, SessionCreate, SessionResponse
from blog.services import session_service

# Only new, create and destroy: a login session is not a listable or
# addressable record.  /login and /logout are registered in blog.main.
router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("/new", response_model=FormDescriptor)
async def new_session():
    return await session_service.new_session_form()


@router.post("", status_code=201, response_model=SessionResponse)
async def create_session(
    data: SessionCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    user = await session_service.login(db, request.session, data.username)
    return SessionResponse(logged_in=True, user=user)


@router.delete("/{session_id}", status_code=204)
async def destroy_session(request: Request):
    session_service.logout(request.session)
