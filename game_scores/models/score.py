# --- Pydantic Models ---
import math

from pydantic import BaseModel, Field, field_validator
from .data import Number

# Scores are stored and serialized as signed 64-bit integers or doubles
MIN_INT_SCORE = -(2 ** 63)
MAX_INT_SCORE = 2 ** 63 - 1

class ScoreRequest(BaseModel):
    game_title: str = Field(..., min_length=1, max_length=200)
    score: Number

    @field_validator('game_title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('GameTitle cannot be empty or whitespace')
        return v.strip()

    @field_validator('score')
    @classmethod
    def validate_score(cls, v):
        if isinstance(v, int) and not MIN_INT_SCORE <= v <= MAX_INT_SCORE:
            raise ValueError('Score must fit in a signed 64-bit integer')
        if isinstance(v, float) and not math.isfinite(v):
            raise ValueError('Score must be a finite number')
        return v
