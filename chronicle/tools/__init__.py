"""
Narrator tool layer: tool call parsing, read-only info tools and the tool registry.
"""

from chronicle.tools.info import INFO_TOOLS, execute_info_tool, is_info_tool
from chronicle.tools.parsing import ToolInputError, parse_tool_call
from chronicle.tools.registry import ToolDefinition, build_tool_registry, tool_names

__all__ = [
    "INFO_TOOLS",
    "ToolDefinition",
    "ToolInputError",
    "build_tool_registry",
    "execute_info_tool",
    "is_info_tool",
    "parse_tool_call",
    "tool_names",
]
