"""
src/orchestrator/router.py

Router: one inbound chat turn -> one response.

    approved action?  -> run it (gate bypassed), summarise
    no LLM / LLM down -> rule-based fallback (orchestrator.fallback)
    LLM, no tools     -> plain text answer
    LLM, tool calls   -> run them in order, halting at the first one that needs approval, then summarise

Nothing is kept between turns: history, auto mode and the approved action all come in with the request.
"""


from typing import Any, Dict, List, Optional, Union
from loguru import logger

import config
from orchestrator import fallback, llm_openai, prompts
from orchestrator.models import (
    ApprovalRequired,
    ChatMessage,
    PendingAction,
    ToolCall,
    ToolResult,
    TurnRequest,
    TurnResponse,
)
from orchestrator.summarizer import summarize
from tools.permissions import describe_action, needs_approval
from tools.registry import ToolExecutionError, ToolRegistry


TurnResult = Union[TurnResponse, ApprovalRequired]


# -------- Context --------------------------------------------------------------
def build_messages(message: str, history: Optional[List[ChatMessage]] = None) -> List[Dict[str, Any]]:
    """System prompt + the last HISTORY_LIMIT history entries + the new user message."""

    recent = (history or [])[-config.HISTORY_LIMIT:]

    return [
        {"role": "system", "content": prompts.SYSTEM_PROMPT},
        *({"role": m.role, "content": m.content} for m in recent),
        {"role": "user", "content": message.strip()},
    ]


# -------- Tool execution -------------------------------------------------------
async def _run_tool(registry: ToolRegistry, call: ToolCall) -> ToolResult:

    try:
        data = await registry.execute(call.name, call.arguments)
    except ToolExecutionError as e:
        return ToolResult(tool=call.name, error=str(e.cause))

    return ToolResult(tool=call.name, data=data)


async def handle_tool_calls(
        tool_calls: List[ToolCall],
        original_message: str,
        *,
        auto_mode: bool,
        registry: ToolRegistry,
        llm=llm_openai,
) -> TurnResult:
    """
    Execute the model's tool calls strictly in order.

    The first call that needs approval stops the scan: later calls never run and
    the results collected before it are dropped, only the pending action goes
    back to the caller. Tool failures are recorded and the scan carries on.
    """

    results: List[ToolResult] = []
    tools_used: List[str] = []

    for call in tool_calls:
        if needs_approval(registry, call.name, auto_mode):
            if results:
                logger.info("Halting for approval of {}; dropping {} earlier result(s)", call.name, len(results))
            return ApprovalRequired(
                tool_name=call.name,
                tool_arguments=call.arguments,
                action_description=describe_action(call.name, call.arguments),
            )

        tools_used.append(call.name)
        results.append(await _run_tool(registry, call))

    return await summarize(results, tools_used, original_message, llm=llm)


async def execute_approved_action(action: PendingAction, *, registry: ToolRegistry, llm=llm_openai) -> TurnResponse:
    """Run exactly the tool the user approved, with its arguments as sent."""

    try:
        data = await registry.execute(action.tool_name, action.tool_arguments)
        return await summarize(
            [ToolResult(tool=action.tool_name, data=data)],
            [action.tool_name],
            f"Execute {action.tool_name}",
            llm=llm,
        )
    except Exception as e:
        cause = e.cause if isinstance(e, ToolExecutionError) else e
        logger.error("Approved action {} failed: {}", action.tool_name, cause)
        return TurnResponse(content=f"❌ Error executing {action.tool_name}: {cause}", tools_used=[action.tool_name])


# -------- Orchestrate ----------------------------------------------------------
async def process_message(request: TurnRequest, *, registry: ToolRegistry, llm=llm_openai) -> TurnResult:
    """
    Entry point: takes one turn request and returns the answer or a pending action.

    Args:
        request: Message, auto mode, caller-held history and optional approved action.
        registry: Tool registry used for every execution.
        llm: Language-model adapter exposing is_configured / chat_completion /
             parse_tool_calls / get_content.
    """

    if request.approved_action is not None:
        return await execute_approved_action(request.approved_action, registry=registry, llm=llm)

    if not llm.is_configured():
        return await fallback.handle_with_rules(request.message, registry)

    messages = build_messages(request.message, request.history)

    try:
        response = await llm.chat_completion(
            messages,
            registry.definitions(),
            temperature=config.CHAT_TEMPERATURE,
            max_tokens=config.CHAT_MAX_TOKENS,
        )
        tool_calls = llm.parse_tool_calls(response)
        content = llm.get_content(response) if not tool_calls else ""
    except Exception as e:
        logger.warning("LLM call failed, using rule-based fallback: {}", e)
        return await fallback.handle_with_rules(request.message, registry)

    if tool_calls:
        return await handle_tool_calls(
            tool_calls,
            request.message,
            auto_mode=request.auto_mode,
            registry=registry,
            llm=llm,
        )

    return TurnResponse(content=content, tools_used=[])
