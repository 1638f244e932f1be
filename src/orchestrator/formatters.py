"""
src/orchestrator/formatters.py

Template formatting of tool results, used when no language model is available
(or it failed). One formatter per known tool in FORMATTERS; any other tool gets
the generic key/value listing.
"""


from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from orchestrator.models import ToolResult, TurnResponse


MAX_LISTED = 5


def _when(created: Any) -> str:
    """Catalog timestamps are epoch milliseconds."""

    try:
        return datetime.fromtimestamp(float(created) / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    except (TypeError, ValueError, OverflowError):
        return "an unknown time"


def _failed_batches(data: Dict[str, Any]) -> str:

    batches = (data or {}).get("batches") or []

    if not batches:
        return "✅ **Great news!** No failed batches found. Your ingestion is running smoothly!\n"

    msg = f"📊 I found **{len(batches)} failed batches** that need attention:\n\n"
    for i, b in enumerate(batches[:MAX_LISTED], start=1):
        msg += f"{i}. Batch `{str(b.get('id', ''))[:12]}...` - Failed at {_when(b.get('created'))}\n"

    if len(batches) > MAX_LISTED:
        msg += f"\n...and {len(batches) - MAX_LISTED} more. Would you like me to analyze any specific batch?\n"

    return msg


def _segment_stats(data: Dict[str, Any]) -> str:

    data = data or {}
    by_state = data.get("byState") or {}
    total = data.get("total") or data.get("totalSegments") or 0
    published = by_state.get("published") or data.get("published") or 0
    draft = by_state.get("draft") or data.get("draft") or 0

    return (
        "🎯 **Segment Overview:**\n"
        f"• **{total}** total segments in this sandbox\n"
        f"• **{published}** are published and active\n"
        f"• **{draft}** are in draft status\n\n"
        "Would you like me to show specific segments or help create a new one?\n"
    )


def _batch_errors(data: Dict[str, Any]) -> str:

    data = data or {}
    total = data.get("totalErrors") or 0

    if total == 0:
        return "✅ No errors found in this batch.\n"

    msg = f"🔬 **Error Analysis for batch {str(data.get('batchId', ''))[:12]}...**\n\n"
    msg += f"Found **{total} errors** total.\n\n"

    top = data.get("topError")
    if top:
        msg += f"**Most common issue:** `{top.get('errorCode')}` ({top.get('percentage')}% of errors)\n"
        msg += f"This typically means: {data.get('recommendation') or 'Check the source data format.'}\n"

    return msg


def _identity_graph(data: Dict[str, Any]) -> str:

    data = data or {}
    members = data.get("members") or []
    ident = data.get("inputIdentity") or {}

    msg = f"🔗 **Identity Graph for {ident.get('namespace')}:{str(ident.get('identity', ''))[:15]}...**\n\n"
    msg += f"This identity is linked to **{len(members)} other identities**.\n"

    if data.get("isSharedDevice"):
        msg += "\n⚠️ **Warning:** Large cluster detected - this might be a shared device!\n"

    return msg


def _sql_query(data: Dict[str, Any]) -> str:

    data = data or {}

    if data.get("polling"):
        return f"⏳ Query `{data.get('id')}` is still running ({data.get('state')}). {data.get('message', '')}\n"

    msg = f"🧮 Query `{data.get('id')}` finished with state **{data.get('state')}**.\n"
    if data.get("rowCount") is not None:
        msg += f"It returned **{data['rowCount']}** rows.\n"

    return msg


def _generic(tool: str, data: Any) -> str:
    """Up to five top-level scalar fields, or a bare success line."""

    if isinstance(data, dict):
        scalars = [(k, v) for k, v in data.items() if v is not None and not isinstance(v, (dict, list))]
        if scalars:
            lines = "".join(f"• {k}: {v}\n" for k, v in scalars[:MAX_LISTED])
            return f"📦 **{tool} completed:**\n{lines}"

    return f"✅ **{tool}** completed successfully.\n"


FORMATTERS: Dict[str, Callable[[Any], str]] = {
    "get_failed_batches": _failed_batches,
    "get_segment_stats": _segment_stats,
    "analyze_batch_errors": _batch_errors,
    "get_identity_graph": _identity_graph,
    "execute_sql_query": _sql_query,
}


def format_tool_result(tool: str, data: Any) -> str:

    formatter = FORMATTERS.get(tool)
    if formatter is None:
        return _generic(tool, data)

    return formatter(data)


def last_data(results: List[ToolResult]) -> Optional[Any]:
    """Data of the last successful result (None if every tool failed)."""

    ok = [r for r in results if r.ok]

    return ok[-1].data if ok else None


def format_results_basic(results: List[ToolResult], tools_used: List[str]) -> TurnResponse:
    """Render every result with its template; failures become one warning line each."""

    content = ""
    for result in results:
        if result.ok:
            content += format_tool_result(result.tool, result.data)
        else:
            content += f"⚠️ {result.tool} failed: {result.error}\n\n"

    return TurnResponse(content=content, data=last_data(results), tools_used=list(tools_used))
