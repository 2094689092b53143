from .places import search_places

__all__ = [
    "search_places",
]
