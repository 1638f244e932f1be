"""
src/orchestrator/summarizer.py

Turns raw tool results into the answer the user sees.
- LLM configured: one prompt section per result (JSON capped at RESULT_CHAR_LIMIT), ask for a short markdown answer.
- LLM missing, failing or silent: template formatting of the same results, so fetched data is never lost.
"""


import json
from typing import Any, List
from loguru import logger

import config
from orchestrator import prompts
from orchestrator.formatters import format_results_basic, last_data
from orchestrator.models import ToolResult, TurnResponse


def truncate_json(data: Any, limit: int = config.RESULT_CHAR_LIMIT) -> str:
    """Pretty JSON for a prompt, hard-cut at `limit` characters with a trailing '...'."""

    text = json.dumps(data, indent=2, ensure_ascii=False, default=str)

    if len(text) > limit:
        return text[:limit] + "..."

    return text


def build_result_context(results: List[ToolResult]) -> str:

    sections = []
    for result in results:
        if result.ok:
            sections.append(f"=== {result.tool} Result ===\n{truncate_json(result.data)}")
        else:
            sections.append(f"Tool {result.tool} failed: {result.error}")

    return "\n\n".join(sections)


async def summarize(results: List[ToolResult], tools_used: List[str], original_message: str, *, llm) -> TurnResponse:
    """
    Summarise `results` as an answer to `original_message`.

    Args:
        results: Tool results of this turn, in call order.
        tools_used: Tool names reported back to the caller.
        original_message: What the user asked.
        llm: Language-model adapter (see orchestrator.llm_openai).
    """

    if not llm.is_configured():
        return format_results_basic(results, tools_used)

    messages = [
        {"role": "system", "content": prompts.SUMMARY_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": prompts.SUMMARY_USER_TEMPLATE.format(
                message=original_message,
                results=build_result_context(results),
            ),
        },
    ]

    try:
        response = await llm.chat_completion(
            messages,
            None,
            temperature=config.SUMMARY_TEMPERATURE,
            max_tokens=config.SUMMARY_MAX_TOKENS,
        )
        summary = llm.get_content(response)
    except Exception as e:
        logger.warning("Summarization failed, using template formatting: {}", e)
        return format_results_basic(results, tools_used)

    if not summary:
        return format_results_basic(results, tools_used)

    return TurnResponse(content=summary, data=last_data(results), tools_used=list(tools_used))
