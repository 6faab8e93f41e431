"""Persistence for user-composed Pokemon teams."""
from .team_store import StoreError, TeamStore

__all__ = [
    'StoreError',
    'TeamStore',
]
