from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recipebook.api.routes import router as api_router
from recipebook.config import settings
from recipebook.errors import CatalogError, ConflictError, NotFoundError, StorageError, ValidationError
from recipebook.logging import configure_logging, get_logger
from recipebook.storage.db import create_db_and_tables

app = FastAPI(title="Recipebook API")
logger = get_logger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _status_for(exc: CatalogError) -> int:
    if isinstance(exc, ConflictError):
        return 409
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, StorageError):
        return 500
    return 400


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    status = _status_for(exc)
    if status >= 500:
        logger.error("api.error path=%s code=%s message=%s", request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=status, content={"detail": exc.message, "code": exc.code})


@app.on_event("startup")
def on_startup() -> None:
    configure_logging(settings.log_level, sql_echo=settings.sql_echo)
    logger.info("startup: creating tables env=%s", settings.env)
    create_db_and_tables()


app.include_router(api_router)
