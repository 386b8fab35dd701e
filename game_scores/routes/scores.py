from fastapi import APIRouter, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from ..core.auth import get_player_id
from ..core.errors import failure_response, result_response
from ..dependencies import get_score_service
from ..models.data import GameScore, ScoreSubmission
from ..models.response import ErrorResponse, TopScoresResponse
from ..models.result import is_success
from ..models.score import ScoreRequest
from ..services.scores import GameScoreService
from ..logger import get_logger

logger = get_logger()
router = APIRouter()

@router.post(
    "/scores",
    response_model=GameScore,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    openapi_extra={"requestBody": {
        "required": True,
        "content": {"application/json": {"schema": ScoreRequest.model_json_schema()}},
    }},
)
async def submit_score(
    request: Request,
    player_id: str = Depends(get_player_id),
    service: GameScoreService = Depends(get_score_service),
):
    """
    Submit a score for the authenticated player.

    - **game_title**: Title of an existing game
    - **score**: The score achieved
    """
    # The body is read only after the caller is authenticated: anonymous requests get 401, never 400
    try:
        data = ScoreRequest.model_validate_json(await request.body())
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    logger.info(f"Score submission from player {player_id} for game {data.game_title!r}")
    submission = ScoreSubmission(game_title=data.game_title, player_id=player_id, score=data.score)
    result = await service.submit_score(submission)
    return result_response(result)

@router.get("/scores", response_model=TopScoresResponse, responses={400: {"model": ErrorResponse}})
async def get_top_scores(
    game: str = Query(..., min_length=1, max_length=200, description="Title of the game"),
    count: int = Query(10, ge=1, le=100, description="Number of scores to return (1-100)"),
    service: GameScoreService = Depends(get_score_service),
):
    """
    Get the top scores for a game, highest first.

    - **game**: Title of the game
    - **count**: Number of scores to return (1-100, default: 10)
    """
    logger.info(f"Requested {count} top scores for game {game!r}")
    result = await service.get_top_scores_for_game(game, count)
    if not is_success(result):
        return failure_response(result)
    return TopScoresResponse(data=result.data)
