from fastapi import APIRouter, Depends

from blog.dependencies import get_current_user
from blog.models import User
from blog.schemas import WelcomeResponse
from blog.services.serializers import user_to_dict

router = APIRouter(tags=["welcome"])

_LINKS = {
    "articles": "/articles",
    "users": "/users",
    "signup": "/signup",
    "login": "/login",
    "logout": "/logout",
}


@router.get("/", response_model=WelcomeResponse, name="root")
@router.get("/welcome/index", response_model=WelcomeResponse)
async def index(current_user: User | None = Depends(get_current_user)):
    return WelcomeResponse(
        message="Welcome to the blog",
        current_user=user_to_dict(current_user),
        links=_LINKS,
    )
