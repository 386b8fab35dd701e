"""Collaborator clients and the score submission service."""
