# app/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from app.core.config import settings
from app.core.errors import UserApiError
from app.database import ping, user_collection
from app.models.user import UserRepository
from app.routes.users import users_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Email uniqueness depends on this index, so failing to build it is fatal.
    try:
        await ping()
        await UserRepository(user_collection).ensure_indexes()
    except PyMongoError as e:
        logger.error("MongoDB startup failed, refusing to serve: %s", e)
        raise
    logger.info("MongoDB connected, user indexes ensured.")
    yield


app = FastAPI(title="Users API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(UserApiError)
async def user_api_error_handler(request: Request, exc: UserApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    return JSONResponse(status_code=400, content={"message": message})


app.include_router(users_router)


@app.get("/")
async def root():
    return {"message": "Welcome to the Users API"}


@app.get("/health")
async def health():
    try:
        await ping()
    except PyMongoError as e:
        logger.warning("Health check failed: %s", e)
        return JSONResponse(status_code=503, content={"status": "error", "message": str(e)})
    return {"status": "ok"}
