"""Content-addressed response cache."""

from .manager import ResultCache

__all__ = ["ResultCache"]
