import pytest

from tools.registry import ToolRegistry


def _executor(name, result, executed):
    async def run(**kwargs):
        executed.append((name, kwargs))
        if isinstance(result, Exception):
            raise result
        return result

    return run


# Every executor call lands here as (tool, kwargs), in order
@pytest.fixture
def executed():
    return []


@pytest.fixture
def registry(executed):
    reg = ToolRegistry()
    tools = [
        ("get_failed_batches", {"batches": []}, False),
        ("get_segment_stats", {"total": 3, "byState": {"published": 2, "draft": 1}}, False),
        ("list_sandboxes", {"sandboxes": [], "count": 0, "current": "prod"}, False),
        ("broken_tool", RuntimeError("boom"), False),
        ("execute_sql_query", {"id": "q1", "state": "SUCCESS"}, True),
        ("create_segment", {"id": "seg-1", "name": "Buyers"}, True),
    ]
    for name, result, approval in tools:
        reg.register(
            name,
            f"Test tool {name}",
            {"properties": {}, "required": []},
            _executor(name, result, executed),
            requires_approval=approval,
        )
    return reg
