"""Bounded-concurrency runner for user-configured external tools."""

from .temp_files import TempFileTracker
from .tool_runner import ToolConfiguration, ToolDefinition, ToolRunner

__all__ = ["TempFileTracker", "ToolConfiguration", "ToolDefinition", "ToolRunner"]
