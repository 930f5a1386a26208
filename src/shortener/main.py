from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.shortener.api.endpoints import auth, users, links, redirect
from src.shortener.api.errors import register_exception_handlers
from src.shortener.core.config import settings, logger
from src.shortener.db.session import init_db
from src.shortener.middleware.logging import add_logging_middleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"URL shortener started, serving short links under {settings.BASE_URL}")
    yield


app = FastAPI(
    title="URL Shortener API",
    description="""
    A FastAPI-based URL shortening service.

    ## Features
    * Shorten URLs anonymously or as a registered user
    * Manage (list, update, delete) your own short links
    * Click tracking on every redirect

    ## Documentation
    * Swagger UI: [/docs](/docs)
    * ReDoc: [/redoc](/redoc)
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)
add_logging_middleware(app)
register_exception_handlers(app)


@app.get("/", tags=["root"])
async def root():
    return {
        "message": "Welcome to URL Shortener API",
        "docs_url": "/docs",
        "redoc_url": "/redoc",
    }


@app.get("/health", tags=["root"])
async def health_check():
    return {"status": "healthy"}


app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(links.router, tags=["links"])
# Catch-all short code route goes last
app.include_router(redirect.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
