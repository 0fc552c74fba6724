"""
Framework integrations for fetch_dataloader.
"""
from .fastapi import (
    LoaderContextDep,
    get_loader_context,
    get_loader_stats,
    loader_dependency,
)

__all__ = [
    "LoaderContextDep",
    "get_loader_context",
    "get_loader_stats",
    "loader_dependency",
]
