from typing import Annotated, Optional

from fastapi import Depends, Request

from modelsearch.config import Settings
from modelsearch.db.interfaces.base import BaseDatabase
from modelsearch.registry import ModelRegistry
from modelsearch.services.indexer import ModelIndexer
from modelsearch.services.opensearch.client import OpenSearchClient
from modelsearch.services.search import SearchService


def get_request_settings(request: Request) -> Settings:
    """Get settings from the request state."""
    return request.app.state.settings


def get_registry(request: Request) -> ModelRegistry:
    """Get the model registry from the request state."""
    return request.app.state.registry


def get_database(request: Request) -> Optional[BaseDatabase]:
    """Get database from the request state, None when it could not be started."""
    return request.app.state.database


def get_opensearch_client(request: Request) -> OpenSearchClient:
    return request.app.state.opensearch_client


def get_indexer(request: Request) -> ModelIndexer:
    return request.app.state.indexer


def get_search_service(request: Request) -> SearchService:
    return request.app.state.search_service


# Dependency type aliases for better type hints
SettingsDep = Annotated[Settings, Depends(get_request_settings)]
RegistryDep = Annotated[ModelRegistry, Depends(get_registry)]
DatabaseDep = Annotated[Optional[BaseDatabase], Depends(get_database)]
OpenSearchDep = Annotated[OpenSearchClient, Depends(get_opensearch_client)]
IndexerDep = Annotated[ModelIndexer, Depends(get_indexer)]
SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]
