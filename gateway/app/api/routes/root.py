"""Root endpoint."""

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/")
async def root(request: Request) -> dict[str, str]:
    """Service banner with the GraphQL path."""
    return {
        "message": request.app.title,
        "version": request.app.version,
        "graphql": request.app.state.settings.graphql_path,
    }
