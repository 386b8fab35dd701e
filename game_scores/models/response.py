from pydantic import BaseModel
from typing import List, Literal, Optional
from .data import GameScore
from .result import FieldError

class TopScoresResponse(BaseModel):
    data: List[GameScore]

class ErrorResponse(BaseModel):
    message: str
    errors: Optional[List[FieldError]] = None

class HealthResponse(BaseModel):
    status: Literal["healthy"] = "healthy"
    uptime: float
