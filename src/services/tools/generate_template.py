import logging
from typing import Annotated, Any

from fastmcp import Context
from mcp.types import ToolAnnotations

from services.registry import template_tool
from template_generator import GenerationError, generate_template

logger = logging.getLogger("twinstick-template")


@template_tool(
    description=(
        "Generates a complete twin-stick shooter template in a Unity project: gameplay scripts, "
        "input actions, Player/Enemy/Projectile prefabs, MainMenu and Gameplay scenes, and the "
        "build settings scene list. Waits for the scripts to compile before creating assets. "
        "Re-running overwrites the generated files."
    ),
    annotations=ToolAnnotations(
        title="Generate Twin-Stick Template",
        destructiveHint=True,
    ),
)
async def generate_twin_stick_template(
    ctx: Context,
    project_root: Annotated[str, "Project folder to generate into (default: current directory)."] | None = None,
    template_root: Annotated[str, "Workspace folder relative to the project (default: Assets/TwinStickTemplate)."] | None = None,
) -> dict[str, Any]:
    root = project_root or "."
    try:
        summary = await generate_template(root, template_root=template_root)
    except GenerationError as e:
        return {
            "success": False,
            "message": str(e),
            "data": {"stage": e.stage, "error_type": type(e).__name__},
        }
    except Exception as e:
        logger.exception("Template generation failed")
        return {"success": False, "message": f"Python error generating template: {str(e)}"}

    message = f"Generated twin-stick template in {summary.workspace}."
    if summary.degraded:
        message += f" {len(summary.degraded)} step(s) degraded."
    return {"success": True, "message": message, "data": summary.model_dump(mode="json")}
