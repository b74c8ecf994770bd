from contextlib import asynccontextmanager
import logging

from app.ai.factory import get_completion_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    # Built once per process and only read afterwards by request handlers.
    client = get_completion_client()
    app.state.completion_client = client
    logger.info("resume_service_started completion_capability=%s", "present" if client else "absent")
    yield
    aclose = getattr(client, "aclose", None)
    if aclose is not None:
        await aclose()
    app.state.completion_client = None
