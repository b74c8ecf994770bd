from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check(request: Request):
    client = getattr(request.app.state, "completion_client", None)
    return {"status": "healthy", "completion_capability": "present" if client is not None else "absent"}
