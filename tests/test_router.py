import pytest

from fakes import FakeLLM, text, tool_calls
from orchestrator.models import ApprovalRequired, ChatMessage, PendingAction, TurnRequest, TurnResponse
from orchestrator.router import build_messages, process_message


GREAT_NEWS = "✅ **Great news!** No failed batches found. Your ingestion is running smoothly!\n"


def _history(n):
    return [ChatMessage(role="user" if i % 2 == 0 else "assistant", content=f"msg {i}") for i in range(n)]


def test_build_messages_keeps_last_20_history_entries():
    messages = build_messages("hello", _history(25))
    assert len(messages) == 1 + 20 + 1
    assert messages[0]["role"] == "system"
    assert messages[1]["content"] == "msg 5"
    assert messages[-2]["content"] == "msg 24"
    assert messages[-1] == {"role": "user", "content": "hello"}


@pytest.mark.asyncio
async def test_plain_text_answer(registry, executed):
    llm = FakeLLM(text("Hi there"))
    response = await process_message(TurnRequest(message="hello"), registry=registry, llm=llm)

    assert response == TurnResponse(content="Hi there", tools_used=[])
    assert executed == []
    assert llm.calls[0]["tools"] == registry.definitions()


@pytest.mark.asyncio
async def test_model_context_is_truncated_to_20(registry):
    llm = FakeLLM(text("ok"))
    await process_message(TurnRequest(message="hello", history=_history(30)), registry=registry, llm=llm)

    sent = llm.calls[0]["messages"]
    assert len(sent) == 22
    assert sent[1]["content"] == "msg 10"


@pytest.mark.asyncio
async def test_tools_run_in_order_then_summarised(registry, executed):
    llm = FakeLLM(
        tool_calls(("get_failed_batches", {"limit": 5}), ("get_segment_stats", {})),
        text("Everything looks fine."),
    )
    response = await process_message(TurnRequest(message="status?"), registry=registry, llm=llm)

    assert executed == [("get_failed_batches", {"limit": 5}), ("get_segment_stats", {})]
    assert response.tools_used == ["get_failed_batches", "get_segment_stats"]
    assert response.content == "Everything looks fine."
    assert response.data == {"total": 3, "byState": {"published": 2, "draft": 1}}


@pytest.mark.asyncio
async def test_halts_at_first_call_needing_approval(registry, executed):
    llm = FakeLLM(
        tool_calls(
            ("list_sandboxes", {}),
            ("execute_sql_query", {"sql": "select 1"}),
            ("get_segment_stats", {}),
            ("create_segment", {"name": "x", "expression": "y"}),
        )
    )
    response = await process_message(TurnRequest(message="run it"), registry=registry, llm=llm)

    assert isinstance(response, ApprovalRequired)
    assert response.requires_approval is True
    assert response.tool_name == "execute_sql_query"
    assert response.tool_arguments == {"sql": "select 1"}
    assert response.action_description.startswith("Execute SQL query:")
    # Nothing after the halted call runs
    assert executed == [("list_sandboxes", {})]
    # No summarisation call was made
    assert len(llm.calls) == 1


@pytest.mark.asyncio
async def test_results_before_approval_halt_are_discarded(registry, executed):
    """Results gathered before the halt are dropped from the pending response, not surfaced."""
    llm = FakeLLM(tool_calls(("get_failed_batches", {}), ("create_segment", {"name": "b", "expression": "e"})))
    response = await process_message(TurnRequest(message="do it"), registry=registry, llm=llm)

    dumped = response.model_dump(by_alias=True, exclude_none=True)
    assert dumped == {
        "toolName": "create_segment",
        "toolArguments": {"name": "b", "expression": "e"},
        "actionDescription": response.action_description,
        "requiresApproval": True,
    }
    assert executed == [("get_failed_batches", {})]


@pytest.mark.asyncio
async def test_auto_mode_never_asks_for_approval(registry, executed):
    llm = FakeLLM(
        tool_calls(("execute_sql_query", {"sql": "select 1"}), ("create_segment", {"name": "b", "expression": "e"})),
        text("Done."),
    )
    response = await process_message(TurnRequest(message="go", auto_mode=True), registry=registry, llm=llm)

    assert isinstance(response, TurnResponse)
    assert response.tools_used == ["execute_sql_query", "create_segment"]
    assert [name for name, _ in executed] == ["execute_sql_query", "create_segment"]


@pytest.mark.asyncio
async def test_tool_failure_does_not_abort_turn(registry, executed):
    llm = FakeLLM(
        tool_calls(("broken_tool", {}), ("get_failed_batches", {})),
        RuntimeError("summary model down"),
    )
    response = await process_message(TurnRequest(message="check"), registry=registry, llm=llm)

    assert [name for name, _ in executed] == ["broken_tool", "get_failed_batches"]
    assert response.content == "⚠️ broken_tool failed: boom\n\n" + GREAT_NEWS
    assert response.data == {"batches": []}
    assert response.tools_used == ["broken_tool", "get_failed_batches"]


@pytest.mark.asyncio
async def test_llm_failure_falls_back_to_rules(registry, executed):
    llm = FakeLLM(ConnectionError("unreachable"))
    response = await process_message(TurnRequest(message="show me failed batches"), registry=registry, llm=llm)

    assert response.content == GREAT_NEWS
    assert response.tools_used == ["get_failed_batches"]
    assert executed == [("get_failed_batches", {"limit": 10})]


@pytest.mark.asyncio
async def test_unconfigured_llm_uses_rules(registry):
    llm = FakeLLM(configured=False)
    response = await process_message(TurnRequest(message="show segment stats"), registry=registry, llm=llm)

    assert response.tools_used == ["get_segment_stats"]
    assert "**3** total segments" in response.content
    assert llm.calls == []


@pytest.mark.asyncio
async def test_approved_action_runs_verbatim_without_gate(registry, executed):
    action = PendingAction(tool_name="execute_sql_query", tool_arguments={"sql": "select 1"})
    llm = FakeLLM(configured=False)
    response = await process_message(TurnRequest(approved_action=action), registry=registry, llm=llm)

    assert executed == [("execute_sql_query", {"sql": "select 1"})]
    assert response.tools_used == ["execute_sql_query"]
    assert response.content == "🧮 Query `q1` finished with state **SUCCESS**.\n"
    assert response.data == {"id": "q1", "state": "SUCCESS"}


@pytest.mark.asyncio
async def test_approved_action_is_summarised_by_llm(registry):
    llm = FakeLLM(text("Query q1 succeeded."))
    action = PendingAction(tool_name="execute_sql_query", tool_arguments={"sql": "select 1"})
    response = await process_message(TurnRequest(approved_action=action), registry=registry, llm=llm)

    assert response.content == "Query q1 succeeded."
    assert 'The user asked: "Execute execute_sql_query"' in llm.calls[0]["messages"][1]["content"]


@pytest.mark.asyncio
async def test_approved_action_failure_is_reported(registry):
    action = PendingAction(tool_name="broken_tool", tool_arguments={})
    response = await process_message(TurnRequest(approved_action=action), registry=registry, llm=FakeLLM(configured=False))

    assert response == TurnResponse(content="❌ Error executing broken_tool: boom", tools_used=["broken_tool"])


def test_turn_requires_message_or_approved_action():
    with pytest.raises(ValueError):
        TurnRequest(message="   ")
