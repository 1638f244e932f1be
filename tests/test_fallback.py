import pytest

from orchestrator import prompts
from orchestrator.fallback import RULES, handle_with_rules, match_rule
from tools.registry import ToolRegistry


@pytest.mark.asyncio
async def test_failed_batches_example(registry, executed):
    response = await handle_with_rules("show me failed batches", registry)

    assert response.content == "✅ **Great news!** No failed batches found. Your ingestion is running smoothly!\n"
    assert response.tools_used == ["get_failed_batches"]
    assert response.data == {"batches": []}
    assert executed == [("get_failed_batches", {"limit": 10})]


@pytest.mark.parametrize(
    "message, tool",
    [
        ("Any ingestion errors today?", None),
        ("errors in ingestion", "get_failed_batches"),
        ("FAILED batch stats", "get_failed_batches"),
        ("batch statistics please", "get_batch_stats"),
        ("schema registry overview", "get_schema_stats"),
        ("list my data sets", "list_datasets"),
        ("audience count", "get_segment_stats"),
        ("show sandboxes", "list_sandboxes"),
        ("identity graph for ECID", "list_namespaces"),
        ("hello", None),
    ],
)
def test_rules_first_match_wins(message, tool):
    rule = match_rule(message)
    assert (rule.tool if rule else None) == tool


def test_rule_order_is_stable():
    assert [r.tool for r in RULES][:2] == ["get_failed_batches", "get_batch_stats"]


@pytest.mark.asyncio
async def test_no_match_returns_help(registry, executed):
    response = await handle_with_rules("what's the weather", registry)

    assert response.content == prompts.HELP_TEXT
    assert response.tools_used == []
    assert executed == []


@pytest.mark.asyncio
async def test_tool_error_is_a_plain_line():
    async def down(**kwargs):
        raise ConnectionError("platform unreachable")

    reg = ToolRegistry()
    reg.register("list_sandboxes", "List sandboxes.", {}, down)
    response = await handle_with_rules("list sandboxes", reg)

    assert response.content == "❌ Error: platform unreachable"
    assert response.tools_used == ["list_sandboxes"]
