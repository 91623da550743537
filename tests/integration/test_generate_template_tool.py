import asyncio

import pytest

from services.registry import get_registered_tools, template_tool, clear_registry
import services.tools.generate_template as generate_tool
from template_generator.compiler import BuildResult
from template_generator.errors import StorageError
from template_generator.pipeline import TemplateGenerator

from .test_helpers import DummyContext
from ..fakes import FakeHost, ManualHost


@pytest.mark.asyncio
async def test_tool_returns_summary(project_root):
    resp = await generate_tool.generate_twin_stick_template(DummyContext(), project_root=str(project_root))

    assert resp["success"] is True
    assert resp["data"]["scenes"]["Gameplay"] == "Assets/TwinStickTemplate/Scenes/Gameplay.unity"
    assert [entry["path"] for entry in resp["data"]["manifest"]] == [
        "Assets/TwinStickTemplate/Scenes/MainMenu.unity",
        "Assets/TwinStickTemplate/Scenes/Gameplay.unity",
    ]
    assert "Assets/TwinStickTemplate" in resp["message"]


@pytest.mark.asyncio
async def test_tool_reports_stage_of_failure(project_root, monkeypatch):
    async def failing_generate(project_root, **kwargs):
        return await TemplateGenerator(
            project_root,
            host=FakeHost(result=BuildResult(success=False, errors=["compile error"])),
            **kwargs,
        ).run()

    monkeypatch.setattr(generate_tool, "generate_template", failing_generate)

    resp = await generate_tool.generate_twin_stick_template(DummyContext(), project_root=str(project_root))

    assert resp["success"] is False
    assert resp["data"] == {"stage": "templates", "error_type": "TypeResolutionError"}
    assert resp["message"].startswith("[templates]")


@pytest.mark.asyncio
async def test_tool_reports_storage_errors(project_root, monkeypatch):
    async def broken_generate(project_root, **kwargs):
        raise StorageError("disk full", stage="scenes")

    monkeypatch.setattr(generate_tool, "generate_template", broken_generate)

    resp = await generate_tool.generate_twin_stick_template(DummyContext())

    assert resp == {
        "success": False,
        "message": "[scenes] disk full",
        "data": {"stage": "scenes", "error_type": "StorageError"},
    }


@pytest.mark.asyncio
async def test_tool_wraps_unexpected_errors(monkeypatch):
    async def exploding_generate(project_root, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(generate_tool, "generate_template", exploding_generate)

    resp = await generate_tool.generate_twin_stick_template(DummyContext())

    assert resp["success"] is False
    assert "boom" in resp["message"]


def test_tool_is_registered_with_annotations():
    tools = {tool["name"]: tool for tool in get_registered_tools()}

    tool = tools["generate_twin_stick_template"]
    assert tool["func"] is generate_tool.generate_twin_stick_template
    assert tool["kwargs"]["annotations"].destructiveHint is True


def test_registering_same_name_replaces_entry():
    saved = get_registered_tools()
    try:
        @template_tool(name="sample_tool", description="first")
        async def first(ctx):
            return {}

        @template_tool(name="sample_tool", description="second")
        async def second(ctx):
            return {}

        sample_tools = [tool for tool in get_registered_tools() if tool["name"] == "sample_tool"]
        assert [tool["description"] for tool in sample_tools] == ["second"]
    finally:
        clear_registry()
        for tool in saved:
            template_tool(name=tool["name"], description=tool["description"], **tool["kwargs"])(tool["func"])


@pytest.mark.asyncio
async def test_tool_reports_run_replaced_by_a_newer_one(project_root, tmp_path, monkeypatch):
    host = ManualHost()

    async def manual_generate(project_root, **kwargs):
        return await TemplateGenerator(project_root, host=host, **kwargs).run()

    monkeypatch.setattr(generate_tool, "generate_template", manual_generate)
    other_root = tmp_path / "Other"
    other_root.mkdir()

    first = asyncio.create_task(
        generate_tool.generate_twin_stick_template(DummyContext(), project_root=str(project_root))
    )
    await asyncio.sleep(0)
    second = asyncio.create_task(
        generate_tool.generate_twin_stick_template(DummyContext(), project_root=str(other_root))
    )
    await asyncio.sleep(0)
    host.complete(index=1)

    first_resp = await first
    second_resp = await second

    assert first_resp["success"] is False
    assert first_resp["data"] == {"stage": "compile", "error_type": "RunReplaced"}
    assert second_resp["success"] is True


@pytest.mark.asyncio
async def test_tool_does_not_swallow_its_own_cancellation(monkeypatch):
    async def hanging_generate(project_root, **kwargs):
        await asyncio.Event().wait()

    monkeypatch.setattr(generate_tool, "generate_template", hanging_generate)

    task = asyncio.create_task(generate_tool.generate_twin_stick_template(DummyContext()))
    await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
