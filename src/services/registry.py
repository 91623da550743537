"""Registry of MCP tools exposed by the template generator server.

Tool modules decorate their entry points with ``template_tool``; the server
collects them with ``get_registered_tools`` and registers them on FastMCP.
"""
from __future__ import annotations

from typing import Any, Callable

_tool_registry: list[dict[str, Any]] = []


def template_tool(
    name: str | None = None,
    description: str | None = None,
    **kwargs: Any,
) -> Callable:
    """Register the decorated function as an MCP tool.

    Extra keyword arguments (``annotations`` for example) are passed through
    to ``FastMCP.tool``.
    """

    def decorator(func: Callable) -> Callable:
        tool_name = name or func.__name__
        _tool_registry[:] = [t for t in _tool_registry if t["name"] != tool_name]
        _tool_registry.append({
            "func": func,
            "name": tool_name,
            "description": description or (func.__doc__ or "").strip(),
            "kwargs": kwargs,
        })
        return func

    return decorator


def get_registered_tools() -> list[dict[str, Any]]:
    return list(_tool_registry)


def clear_registry() -> None:
    """Forget every registered tool (tests only)."""
    _tool_registry.clear()
