from typing import Optional

from fastapi import FastAPI
from fastapi.responses import ORJSONResponse

from . import __version__
from .core.errors import register_exception_handlers
from .core.events import lifespan
from .dependencies import ServiceContainer
from .routes import games, health, scores


def create_app(services: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Build the FastAPI app. When ``services`` is given it is used as is and
    left open on shutdown; otherwise collaborators are built at startup.
    """
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title="Game Scores Service",
        description="Records and queries video game scores",
        version=__version__,
    )
    app.state.services = services
    app.state.owns_services = False

    register_exception_handlers(app)

    app.include_router(scores.router)
    app.include_router(games.router)
    app.include_router(health.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "game_scores.main:app",
        host="0.0.0.0",
        port=8000,
        log_level="info"
    )
