"""Pydantic DTOs shared across the runtime."""

from .tool_result import ToolResultDTO

__all__ = ["ToolResultDTO"]
