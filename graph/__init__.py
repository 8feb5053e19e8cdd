"""Graph of discovered modules."""

from .model import ModuleGraph

__all__ = ["ModuleGraph"]
