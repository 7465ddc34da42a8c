import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Sequence

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from videohub.core import config
from videohub.core.errors import register_exception_handlers
from videohub.core.middleware import BodySizeLimitMiddleware
from videohub.database import Base, engine, ensure_user_schema
from videohub.models import user  # noqa: F401
from videohub.routes import healthcheck_routes, user_routes
from videohub.services.media_uploader import CloudinaryUploader, MediaUploader

API_PREFIX = '/api/v1'

ROUTERS: Sequence[tuple[APIRouter, str]] = (
    (healthcheck_routes.router, '/healthcheck'),
    (user_routes.router, '/users'),
)

logger = logging.getLogger(__name__)


def initialize_database() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        ensure_user_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@asynccontextmanager
async def lifespan(app: FastAPI):
    initialize_database()
    yield


def create_app(
    routers: Sequence[tuple[APIRouter, str]] = ROUTERS,
    media_uploader: MediaUploader | None = None,
) -> FastAPI:
    logging.basicConfig(level=config.LOG_LEVEL)
    config.validate_runtime_config()

    app = FastAPI(title='VideoHub API', lifespan=lifespan)
    app.state.media_uploader = media_uploader or CloudinaryUploader.from_config()

    app.add_middleware(
        BodySizeLimitMiddleware,
        max_body_size=config.REQUEST_BODY_LIMIT_BYTES,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGIN,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_exception_handlers(app)

    for router, prefix in routers:
        app.include_router(router, prefix=f'{API_PREFIX}{prefix}')

    public_dir = Path(config.PUBLIC_DIR)
    public_dir.mkdir(parents=True, exist_ok=True)
    app.mount('/', StaticFiles(directory=public_dir), name='public')

    return app


app = create_app()
