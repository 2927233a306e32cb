import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from auth import router as auth_router
from blog import router as blog_router
from core import db, settings
from core.errors import ApiError, InvalidInputError

logging.basicConfig(
    level=settings.log_level(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

# Allow local frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ApiError)
async def api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = str(first.get("msg") or "Invalid request.")
    error = InvalidInputError(f"{field}: {message}" if field else message)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


app.include_router(auth_router.router, prefix="/api/auth", tags=["auth"])
app.include_router(blog_router.posts, prefix="/api/post", tags=["posts"])
app.include_router(blog_router.users, prefix="/api/users", tags=["users"])
app.include_router(blog_router.customers, prefix="/api/customers", tags=["customers"])
app.include_router(blog_router.comments, prefix="/api/comments", tags=["comments"])
app.include_router(blog_router.tags, prefix="/api/tags", tags=["tags"])
app.include_router(blog_router.categories, prefix="/api/categories", tags=["categories"])


@app.get("/")
def root() -> dict:
    return {"message": "blog api"}
