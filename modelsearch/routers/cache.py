from fastapi import APIRouter

from modelsearch.dependencies import RegistryDep

router = APIRouter(prefix="/cache", tags=["cache"])


@router.post("/clear")
def clear_cache(registry: RegistryDep) -> dict:
    """Drop every cached field tree, schema and weighted field list."""
    registry.clear_cache()
    return {"status": "cleared"}
