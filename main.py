"""Main application entry point for the Endpoint Metadata Service."""

from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import ApplicationConfig, load_config
from middleware import CorrelationMiddleware
from routers import health_router, metadata_router, metrics_router
from services import (
    AgentServiceClient,
    EndpointMetadataService,
    HealthMetricsService,
    SearchClient,
)
from utils import configure_logging, get_logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create the collaborator clients and services for the app's lifetime."""
    config = load_config()
    configure_logging(config.log_level, json_output=config.log_json)
    logger = get_logger(__name__)

    # Blocking HTTP calls to the collaborators run in this pool
    executor = ThreadPoolExecutor(
        max_workers=config.executor_workers, thread_name_prefix="metadata_worker"
    )
    search_client = SearchClient(config, executor)
    agent_client = AgentServiceClient(config, executor)

    app.state.metadata_service = EndpointMetadataService(config, search_client, agent_client)
    app.state.health_metrics = HealthMetricsService(config, search_client, agent_client)
    logger.info(
        "Endpoint metadata service started",
        search_url=config.search_url,
        agent_service_url=config.agent_service_url,
        metadata_index=config.metadata_index,
    )

    try:
        yield
    finally:
        logger.info("Shutting down thread pool...")
        executor.shutdown(wait=True)
        logger.info("Endpoint metadata service stopped.")


def create_app(config: Optional[ApplicationConfig] = None, with_lifespan: bool = True) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or load_config()
    app = FastAPI(
        title=config.app_name,
        description="Host metadata listing with agent status enrichment",
        version=config.app_version,
        lifespan=lifespan if with_lifespan else None,
    )
    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(metadata_router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    config = load_config()
    uvicorn.run(app, host=config.server_host, port=config.server_port)
