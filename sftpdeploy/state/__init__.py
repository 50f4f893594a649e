"""State management (deploy cache)"""
from .cache_store import load_cache, save_cache

__all__ = ["load_cache", "save_cache"]
