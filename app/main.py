import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logging import setup_logging
from app.database.connection import Base, engine
from app.middleware.no_cache import NoCacheMiddleware
from app.middleware.request_logging import RequestLoggingMiddleware
from app.models import entity, product, review, store  # noqa: F401  register tables before create_all
from app.routes import system
from app.routes.catalog import router as catalog_router
from app.routes.products import router as product_router
from app.routes.reviews import router as review_router
from app.routes.stores import router as store_router

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.APP_NAME)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(NoCacheMiddleware, path_prefix="/api")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(product_router)
app.include_router(store_router)
app.include_router(review_router)
app.include_router(catalog_router)
app.include_router(system.router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
