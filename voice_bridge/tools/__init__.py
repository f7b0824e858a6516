from .clock import DateAndTimeTool, date_and_time
from .weather import WeatherTool, parse_coordinates
from .builtin import register_builtin_tools
from .registry import ToolRegistry
from .mcp_config import McpConfig, McpServerConfig, load_mcp_config, parse_mcp_config
from .mcp_server import McpServerConnection, tool_arguments
from .registration import ToolInvoker, ToolRegistration
from .mcp_providers import McpToolProviders

__all__ = [
    "DateAndTimeTool",
    "McpConfig",
    "McpServerConfig",
    "McpServerConnection",
    "McpToolProviders",
    "ToolInvoker",
    "ToolRegistration",
    "ToolRegistry",
    "WeatherTool",
    "date_and_time",
    "load_mcp_config",
    "parse_mcp_config",
    "parse_coordinates",
    "register_builtin_tools",
    "tool_arguments",
]
