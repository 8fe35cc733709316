import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from blog.cache import cache
from blog.config import settings
from blog.exceptions import BlogError, NotFoundError
from blog.middleware import RequestLogMiddleware
from blog.routers import articles, comments, sessions, users, welcome
from blog.schemas import FormDescriptor

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    await cache.connect()
    logger.info("Blog started (env=%s)", settings.APP_ENV)
    yield
    await cache.disconnect()


app = FastAPI(
    title="Blog",
    description="Articles, comments, users and login sessions",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware (last added runs outermost)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE,
    max_age=settings.SESSION_MAX_AGE,
    same_site="lax",
    https_only=False,
)
app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error rendering
# ---------------------------------------------------------------------------

@app.exception_handler(BlogError)
async def blog_error_handler(request: Request, exc: BlogError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def route_error_handler(request: Request, exc: StarletteHTTPException):
    # A known path with an unsupported method (GET /sessions/5) is an
    # unmatched route, same as an unknown path.
    if exc.status_code in (404, 405):
        err = NotFoundError(f"No route matches [{request.method}] {request.url.path}")
        return JSONResponse(status_code=err.status_code, content=err.to_dict())
    return await http_exception_handler(request, exc)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

app.include_router(welcome.router)
app.include_router(users.router)
app.include_router(sessions.router)
app.include_router(articles.router)
app.include_router(comments.router)

# Named aliases
app.add_api_route(
    "/signup", users.new_user, methods=["GET"], name="signup",
    response_model=FormDescriptor, tags=["users"],
)
app.add_api_route(
    "/login", sessions.new_session, methods=["GET"], name="login",
    response_model=FormDescriptor, tags=["sessions"],
)
app.add_api_route(
    "/logout", sessions.destroy_session, methods=["DELETE"], name="logout",
    status_code=204, tags=["sessions"],
)


@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}
