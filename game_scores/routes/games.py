from fastapi import APIRouter, Depends, Query
from ..core.errors import failure_response
from ..dependencies import get_game_service
from ..models.data import Game
from ..models.response import ErrorResponse
from ..models.result import internal_error, is_success
from ..services.games import GameQueryService
from ..logger import get_logger

logger = get_logger()
router = APIRouter()

@router.get("/games", response_model=Game, responses={404: {"model": ErrorResponse}})
async def get_game(
    title: str = Query(..., min_length=1, max_length=200, description="Exact title of the game"),
    games: GameQueryService = Depends(get_game_service),
):
    """Look up a game by its exact title."""
    result = await games.get_game_by_title(title)
    if is_success(result):
        return result.data
    if result.status == 404:
        logger.info(f"Game {title!r} not found")
        return failure_response(result)
    return failure_response(internal_error())
