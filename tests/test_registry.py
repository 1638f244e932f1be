import httpx
import pytest

from tools.catalog import build_registry
from tools.platform import PlatformClient
from tools.registry import ToolExecutionError, ToolRegistry


def test_definitions_are_openai_function_specs(registry):
    specs = registry.definitions()
    assert [s["function"]["name"] for s in specs][:3] == ["get_failed_batches", "get_segment_stats", "list_sandboxes"]
    assert all(s["type"] == "function" for s in specs)
    assert specs[0]["function"]["parameters"]["type"] == "object"


def test_requires_approval_flags(registry):
    assert registry.requires_approval("execute_sql_query") is True
    assert registry.requires_approval("list_sandboxes") is False
    assert registry.requires_approval("no_such_tool") is False


def test_list_tools_returns_definitions(registry):
    names = {t.name for t in registry.list_tools()}
    assert {"create_segment", "broken_tool"} <= names


def test_duplicate_registration_rejected(registry):
    async def noop():
        return None

    with pytest.raises(ValueError):
        registry.register("list_sandboxes", "again", {}, noop)


@pytest.mark.asyncio
async def test_execute_passes_arguments(registry, executed):
    data = await registry.execute("get_failed_batches", {"limit": 3})
    assert data == {"batches": []}
    assert executed == [("get_failed_batches", {"limit": 3})]


@pytest.mark.asyncio
async def test_execute_wraps_executor_failure(registry):
    with pytest.raises(ToolExecutionError) as exc_info:
        await registry.execute("broken_tool", {})
    assert exc_info.value.tool == "broken_tool"
    assert isinstance(exc_info.value.cause, RuntimeError)
    assert str(exc_info.value.cause) == "boom"


@pytest.mark.asyncio
async def test_execute_unknown_tool():
    with pytest.raises(ToolExecutionError) as exc_info:
        await ToolRegistry().execute("nope")
    assert exc_info.value.tool == "nope"


def test_platform_catalog_flags_only_mutating_tools():
    client = PlatformClient(base_url="https://platform.test", transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    reg = build_registry(client)

    gated = {t.name for t in reg.list_tools() if t.requires_approval}
    assert gated == {"execute_sql_query", "create_segment"}
    # Every rule-fallback tool must exist in the catalog
    for name in ("get_failed_batches", "get_batch_stats", "get_schema_stats", "list_datasets",
                 "get_segment_stats", "list_sandboxes", "list_namespaces"):
        assert reg.get(name) is not None
