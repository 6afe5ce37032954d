from typing import Optional
from modelsearch.config import Settings, get_settings
from .client import OpenSearchClient


def make_opensearch_client(settings: Optional[Settings] = None, host: Optional[str] = None) -> OpenSearchClient:
    """Factory function to create an OpenSearch client."""
    if settings is None:
        settings = get_settings()
    opensearch_host = host or settings.opensearch.host
    return OpenSearchClient(host=opensearch_host, settings=settings)
