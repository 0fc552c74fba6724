"""
Store implementations for fetch_dataloader.
"""
from .memory import (
    MemoryResultCache,
    create_memory_result_cache,
)

__all__ = [
    "MemoryResultCache",
    "create_memory_result_cache",
]
