"""
src/orchestrator/llm_openai.py

OpenAI client wrapper for function calling.
- is_configured(): whether an API key is available
- chat_completion(): one shot (no tool execution)
- parse_tool_calls() / get_content(): read a response without touching its SDK types elsewhere
"""


import json
from typing import Any, Dict, List, Optional
from loguru import logger
from openai import AsyncOpenAI

import config
from orchestrator.models import ToolCall


_client: Optional[AsyncOpenAI] = None


def is_configured() -> bool:

    return bool(config.OPENAI_API_KEY)


def _get_client() -> AsyncOpenAI:

    global _client

    if _client is None:
        _client = AsyncOpenAI(api_key=config.OPENAI_API_KEY)

    return _client


async def chat_completion(
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        *,
        temperature: float = config.CHAT_TEMPERATURE,
        max_tokens: int = config.CHAT_MAX_TOKENS,
):
    """
    Low-level call to OpenAI Chat Completions with optional tool specs.
    Returns the raw response object.
    """

    kwargs: Dict[str, Any] = {}
    if tools:
        kwargs["tools"] = tools
        kwargs["tool_choice"] = "auto"

    logger.debug("chat completion: {} messages, {} tools", len(messages), len(tools or []))

    return await _get_client().chat.completions.create(
        model=config.OPENAI_MODEL,
        messages=messages,
        temperature=temperature,
        max_tokens=max_tokens,
        **kwargs,
    )


def parse_tool_calls(response) -> Optional[List[ToolCall]]:
    """
    Normalize tool calls from the first choice of an OpenAI response.
    Returns None when the model answered in plain text.
    """

    tcs = getattr(response.choices[0].message, "tool_calls", None)

    if not tcs:
        return None

    out = []
    for tc in tcs:
        if tc.type == "function" and tc.function:
            try:
                args = json.loads(tc.function.arguments or "{}")
            except json.JSONDecodeError:
                logger.warning("Unparseable arguments for tool {}: {!r}", tc.function.name, tc.function.arguments)
                args = {}
            out.append(ToolCall(name=tc.function.name, arguments=args))

    return out


def get_content(response) -> str:

    return response.choices[0].message.content or ""
