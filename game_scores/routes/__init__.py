from . import games, health, scores

__all__ = ["games", "health", "scores"]
