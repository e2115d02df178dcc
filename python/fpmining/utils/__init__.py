from .support import resolve_support

__all__ = [
    "resolve_support"
]
