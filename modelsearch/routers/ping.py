from fastapi import APIRouter

from modelsearch.dependencies import DatabaseDep, OpenSearchDep, SettingsDep
from modelsearch.schemas.api.health import HealthResponse, ServiceStatus

router = APIRouter(tags=["health"])


@router.get("/ping", response_model=HealthResponse)
def ping(settings: SettingsDep, database: DatabaseDep, opensearch_client: OpenSearchDep) -> HealthResponse:
    """Report the status of the database and OpenSearch."""
    services = {}

    if database is None:
        services["database"] = ServiceStatus(status="unhealthy", message="Database not connected")
    else:
        services["database"] = ServiceStatus(status="healthy", message="Connected successfully")

    if opensearch_client.health_check():
        services["opensearch"] = ServiceStatus(status="healthy", message="Cluster is green or yellow")
    else:
        services["opensearch"] = ServiceStatus(status="unhealthy", message="Cluster is not reachable")

    overall = "ok" if all(service.status == "healthy" for service in services.values()) else "degraded"
    return HealthResponse(
        status=overall,
        version=settings.app_version,
        environment=settings.environment,
        service_name=settings.service_name,
        services=services,
    )
