"""Read-only status: GET /health."""
from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    """Current color and connected client count."""
    relay = request.app.state.relay
    return {
        "status": "ok",
        "currentColor": relay.current_color,
        "clients": len(relay.registry),
    }
