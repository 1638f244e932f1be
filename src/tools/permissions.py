"""
src/tools/permissions.py — approval gate for mutating tools

A tool flagged `requires_approval` in the registry must not run until a human
confirms it, unless the caller turned on auto mode for the turn. The policy is
kept here, apart from the orchestrator, so it can be read and audited on its own.

Usage:
    from tools.permissions import needs_approval
    if needs_approval(registry, call.name, auto_mode):
        return ApprovalRequired(...)
"""


from typing import Any, Dict

from tools.registry import ToolRegistry


def needs_approval(registry: ToolRegistry, tool_name: str, auto_mode: bool) -> bool:
    """
    Return True if `tool_name` has to pause for explicit confirmation.

    Args:
        registry: The tool registry holding the approval flags.
        tool_name: Name of the tool the model wants to call.
        auto_mode: Caller flag that pre-approves every tool for this turn.
    """

    return registry.requires_approval(tool_name) and not auto_mode


def describe_action(tool_name: str, arguments: Dict[str, Any]) -> str:
    """Human-readable description of a pending action, shown next to the approve button."""

    if tool_name == "execute_sql_query":
        sql = str(arguments.get("sql") or "")
        return f"Execute SQL query:\n```sql\n{sql[:100]}...\n```"

    if tool_name == "create_segment":
        expression = str(arguments.get("expression") or "")
        return f'Create segment "{arguments.get("name", "")}" with PQL:\n```\n{expression}\n```'

    return f"Execute {tool_name}"
