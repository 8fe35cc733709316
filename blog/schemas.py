from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Write payloads leave rule-checked fields optional: presence and length are
# enforced by blog.validators so that every violation comes back as one
# field-level ValidationError.


# --- User ---

class UserCreate(BaseModel):
    username: str | None = None
    email: str | None = None


class UserUpdate(BaseModel):
    username: str | None = None
    email: str | None = None


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)


class UserDetail(UserResponse):
    articles: list["ArticleResponse"] = []


# --- Session ---

class SessionCreate(BaseModel):
    username: str = Field(min_length=1)


class SessionResponse(BaseModel):
    logged_in: bool
    user: UserResponse | None = None


# --- Comment ---

class CommentCreate(BaseModel):
    commenter: str | None = None
    body: str | None = None


class CommentUpdate(BaseModel):
    commenter: str | None = None
    body: str | None = None


class CommentResponse(BaseModel):
    id: int
    article_id: int
    commenter: str
    body: str
    created_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)


# --- Article ---

class ArticleCreate(BaseModel):
    title: str | None = None
    body: str | None = None
    # Falls back to the logged-in user when omitted.
    user_id: int | None = None


class ArticleUpdate(BaseModel):
    title: str | None = None
    body: str | None = None
    user_id: int | None = None


class ArticleResponse(BaseModel):
    id: int
    title: str
    body: str | None = None
    user_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    author: UserResponse | None = None
    model_config = ConfigDict(from_attributes=True)


class ArticleDetail(ArticleResponse):
    comments: list[CommentResponse] = []


# --- Forms (new / edit actions) ---

class FormDescriptor(BaseModel):
    resource: str
    action: str
    method: str
    path: str
    fields: dict[str, dict[str, Any]]
    values: dict[str, Any] = {}


# --- Pagination ---

class PaginatedResponse(BaseModel):
    items: list
    total: int
    page: int
    page_size: int
    pages: int


# --- Welcome ---

class WelcomeResponse(BaseModel):
    message: str
    current_user: UserResponse | None = None
    links: dict[str, str]


UserDetail.model_rebuild()
