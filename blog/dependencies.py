from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from blog.config import settings
from blog.database import get_db
from blog.models import User
from blog.services import session_service


class PaginationParams:
    """
    Page/page-size query parameters shared by the index actions.

    The ``page_size`` ceiling comes from ``settings.MAX_PAGE_SIZE``; a
    larger value is rejected with 422.
    """

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number (1-based)."),
        page_size: int = Query(
            settings.DEFAULT_PAGE_SIZE,
            ge=1,
            le=settings.MAX_PAGE_SIZE,
            description=f"Number of items returned per page (max {settings.MAX_PAGE_SIZE}).",
        ),
    ) -> None:
        self.page = page
        self.page_size = page_size


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """The logged-in user, or None for anonymous requests."""
    return await session_service.current_user(db, request.session)
