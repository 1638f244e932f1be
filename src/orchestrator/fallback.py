"""
src/orchestrator/fallback.py

Rule-based answers for when no language model is configured or reachable.
Rules are tried top to bottom; the first regex that matches the raw message runs
its tool with fixed arguments and the result is rendered with the templates.
"""


import re
from typing import Any, Dict, List, NamedTuple, Optional
from loguru import logger

from orchestrator import prompts
from orchestrator.formatters import format_tool_result
from orchestrator.models import TurnResponse
from tools.registry import ToolExecutionError, ToolRegistry


class Rule(NamedTuple):

    pattern: re.Pattern
    tool: str
    arguments: Dict[str, Any]


def _rule(pattern: str, tool: str, arguments: Optional[Dict[str, Any]] = None) -> Rule:

    return Rule(re.compile(pattern, re.IGNORECASE), tool, arguments or {})


RULES: List[Rule] = [
    _rule(r"(failed|error|fail).*(batch|ingestion)", "get_failed_batches", {"limit": 10}),
    _rule(r"batch.*(stat|stats|statistic)", "get_batch_stats", {"timeRange": "24h"}),
    _rule(r"schema.*(stat|stats|registry)", "get_schema_stats"),
    _rule(r"(list|show|get).*(dataset|data set)", "list_datasets", {"limit": 10}),
    _rule(r"(segment|audience).*(stat|stats|count|how many)", "get_segment_stats"),
    _rule(r"(list|show|get).*(sandbox|environment)", "list_sandboxes"),
    _rule(r"identity.*(graph|link)", "list_namespaces"),
]


def match_rule(message: str, rules: List[Rule] = RULES) -> Optional[Rule]:

    return next((r for r in rules if r.pattern.search(message or "")), None)


async def handle_with_rules(message: str, registry: ToolRegistry, rules: List[Rule] = RULES) -> TurnResponse:
    """
    Answer `message` without a language model.

    Returns the templated tool result for the first matching rule, an error
    line if that tool fails, or the help text when nothing matches.
    """

    rule = match_rule(message, rules)

    if rule is None:
        return TurnResponse(content=prompts.HELP_TEXT, tools_used=[])

    logger.info("Rule fallback matched {}", rule.tool)
    try:
        data = await registry.execute(rule.tool, dict(rule.arguments))
    except ToolExecutionError as e:
        return TurnResponse(content=f"❌ Error: {e.cause}", tools_used=[rule.tool])

    return TurnResponse(content=format_tool_result(rule.tool, data), data=data, tools_used=[rule.tool])
