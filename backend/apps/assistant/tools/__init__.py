"""
Assistant tools: contracts shared with the model, validated inputs, the
executor that runs them concurrently, and the client actions they produce.
"""

from .actions import ActionTracker, PendingAction, is_allowed_url
from .registry import ToolDefinition, ToolRegistry, ToolResult
from .schemas import register_all_tools

# Auto-register tool definitions on import
register_all_tools()

__all__ = [
    'ActionTracker',
    'PendingAction',
    'ToolDefinition',
    'ToolRegistry',
    'ToolResult',
    'is_allowed_url',
]
