import asyncio
from contextlib import asynccontextmanager
from fastapi import FastAPI
from ..dependencies import build_container
from ..logger import get_logger

logger = get_logger()

async def startup_event(app: FastAPI):
    """Build the collaborators unless a container was supplied up front"""
    if app.state.services is not None:
        return
    try:
        app.state.services = await build_container()
        app.state.owns_services = True
        logger.info("Services initialized")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}")
        raise

async def shutdown_event(app: FastAPI):
    """Close connections opened at startup"""
    if not app.state.owns_services:
        return
    try:
        async with asyncio.timeout(5.0):
            await app.state.services.close()
            logger.info("Service connections closed")
    except asyncio.TimeoutError:
        logger.warning("Shutdown timed out, abandoning open connections")
    finally:
        app.state.services = None
        app.state.owns_services = False

@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup_event(app)
    try:
        yield
    finally:
        await shutdown_event(app)
