import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from modelsearch.config import get_settings
from modelsearch.db.factory import make_database
from modelsearch.exceptions import ConfigurationError, OpenSearchException, RepositoryException, UnknownModelError
from modelsearch.registry import ModelRegistry
from modelsearch.routers import cache, indexes, models, ping, search
from modelsearch.services.indexer import ModelIndexer
from modelsearch.services.opensearch.factory import make_opensearch_client
from modelsearch.services.search import SearchService

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting model search API...")

    settings = get_settings()
    app.state.settings = settings

    # Fail fast on malformed model configuration
    registry = ModelRegistry.from_settings(settings)
    registry.validate()
    app.state.registry = registry
    logger.info(f"Models configured: {registry.model_ids()}")

    try:
        database = make_database(settings)
        logger.info("Database connected")
    except Exception as e:
        logger.warning(f"Database unavailable, indexing and hydration disabled: {e}")
        database = None
    app.state.database = database

    app.state.opensearch_client = make_opensearch_client(settings)
    if app.state.opensearch_client.health_check():
        logger.info("OpenSearch connected successfully")
    else:
        logger.warning("OpenSearch connection failed")

    app.state.indexer = ModelIndexer(app.state.opensearch_client, registry, database, settings)
    app.state.search_service = SearchService(app.state.opensearch_client, registry, database, settings)

    logger.info("API ready")
    yield

    # Cleanup
    if database is not None:
        database.teardown()
    logger.info("API shutdown complete")


async def unknown_model_handler(request: Request, exc: UnknownModelError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc), "path": exc.path})


async def repository_error_handler(request: Request, exc: RepositoryException) -> JSONResponse:
    return JSONResponse(status_code=503, content={"detail": str(exc)})


async def opensearch_error_handler(request: Request, exc: OpenSearchException) -> JSONResponse:
    return JSONResponse(status_code=502, content={"detail": str(exc)})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Model Search API",
        description="Configuration-driven OpenSearch indexing and weighted search over database models",
        version=get_settings().app_version,
        lifespan=lifespan,
    )

    app.add_exception_handler(UnknownModelError, unknown_model_handler)
    app.add_exception_handler(ConfigurationError, configuration_error_handler)
    app.add_exception_handler(RepositoryException, repository_error_handler)
    app.add_exception_handler(OpenSearchException, opensearch_error_handler)

    # Include routers
    app.include_router(ping.router, prefix="/api/v1")
    app.include_router(models.router, prefix="/api/v1")
    app.include_router(indexes.router, prefix="/api/v1")
    app.include_router(search.router, prefix="/api/v1")
    app.include_router(cache.router, prefix="/api/v1")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, port=8000, host="0.0.0.0")
