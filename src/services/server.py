"""FastMCP server exposing the template generator tools."""
from __future__ import annotations

import importlib
import logging
import pkgutil

from fastmcp import FastMCP

import services.tools
from services.registry import get_registered_tools

logger = logging.getLogger("twinstick-template")

SERVER_NAME = "twinstick-template"


def discover_tools() -> None:
    """Import every module under ``services.tools`` so their decorators run."""
    for module in pkgutil.iter_modules(services.tools.__path__):
        importlib.import_module(f"{services.tools.__name__}.{module.name}")


def create_server() -> FastMCP:
    discover_tools()
    mcp = FastMCP(name=SERVER_NAME)
    for tool in get_registered_tools():
        mcp.tool(name=tool["name"], description=tool["description"], **tool["kwargs"])(tool["func"])
        logger.debug("Registered tool %s", tool["name"])
    logger.info("Registered %d tool(s)", len(get_registered_tools()))
    return mcp
