import logging

from .config import service

logging.basicConfig(
    level=service.LOG_LEVEL.upper(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

def get_logger(name: str = 'game_scores') -> logging.Logger:
    """Return the service logger, or a child of it"""
    if name != 'game_scores' and not name.startswith('game_scores.'):
        name = f'game_scores.{name}'
    return logging.getLogger(name)
