from contextlib import asynccontextmanager
from pathlib import Path
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from sentra.core.config import settings
from sentra.core.errors import (
    UploadError,
    http_exception_handler,
    unhandled_exception_handler,
    upload_exception_handler,
    validation_exception_handler,
)
from sentra.core.logging import setup_logging
from sentra.db.init_db import create_initial_data, init_db
from sentra.db.session import AsyncSessionLocal, engine
from sentra.routers import admin, auth, awareness, incidents
from sentra.services.storage import build_storage

logger = logging.getLogger("sentra")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await init_db(engine)
    async with AsyncSessionLocal() as session:
        await create_initial_data(session)
    app.state.storage = build_storage(settings)
    logger.info(f"{settings.PROJECT_NAME} started with {settings.STORAGE_BACKEND} storage")
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API for Sentra - campus incident reporting",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(UploadError, upload_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.include_router(auth.router, prefix=settings.API_PREFIX, tags=["Authentication"])
app.include_router(incidents.router, prefix=settings.API_PREFIX, tags=["Incidents"])
app.include_router(admin.router, prefix=settings.API_PREFIX, tags=["Admin"])
app.include_router(awareness.router, prefix=settings.API_PREFIX, tags=["Awareness"])

Path(settings.UPLOADS_DIR).mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOADS_DIR), name="uploads")


@app.get("/api/health", tags=["Health"])
async def health_check():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
