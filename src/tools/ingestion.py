"""
src/tools/ingestion.py — batch & dataset tools (Catalog Service)

Provides:
- get_failed_batches(...): most recent failed batches
- get_batch_stats(...): batch counts per status for a time window
- analyze_batch_errors(...): group a batch's errors by code and suggest a fix
- list_datasets(...): datasets in the current sandbox

Catalog returns collections as an object keyed by id; `_as_list` flattens that
into a list of dicts with the id folded in so formatters can treat them alike.
"""


import re
import time
from collections import Counter
from typing import Any, Dict, List

from tools.platform import PlatformClient


CATALOG = "/data/foundation/catalog"

# Error codes we can say something useful about
RECOMMENDATIONS: Dict[str, str] = {
    "INGEST-1212-400": "The data does not match the dataset schema. Check field types and required fields.",
    "INGEST-1401-400": "The file could not be parsed. Confirm the file format (CSV/JSON/Parquet) and encoding.",
    "INGEST-1204-500": "A platform-side failure occurred. Retrying the batch usually resolves it.",
    "MAPPER-1300-400": "A mapping expression failed. Review the dataflow mapping for this source.",
}


# --- Helpers -------------------------------------------------------------------
def _as_list(payload: Any) -> List[Dict[str, Any]]:

    if isinstance(payload, list):
        return payload

    return [{"id": k, **v} for k, v in (payload or {}).items() if isinstance(v, dict)]


def _window_ms(time_range: str) -> int:
    """'24h' / '7d' / '30m' -> milliseconds. Anything else means 24h."""

    m = re.fullmatch(r"\s*(\d+)\s*([mhd])\s*", time_range or "")
    if not m:
        return 24 * 3600 * 1000

    qty, unit = int(m.group(1)), m.group(2)

    return qty * {"m": 60, "h": 3600, "d": 86400}[unit] * 1000


# --- Public API ----------------------------------------------------------------
async def get_failed_batches(client: PlatformClient, *, limit: int = 10) -> Dict[str, Any]:

    payload = await client.get(
        f"{CATALOG}/batches",
        params={"status": "failed", "limit": limit, "orderBy": "desc:created"},
    )
    batches = _as_list(payload)

    return {"batches": batches, "count": len(batches)}


async def get_batch_stats(client: PlatformClient, *, timeRange: str = "24h") -> Dict[str, Any]:
    """Count batches by status over the last `timeRange` (e.g. '24h', '7d')."""

    created_after = int(time.time() * 1000) - _window_ms(timeRange)
    payload = await client.get(f"{CATALOG}/batches", params={"createdAfter": created_after, "limit": 100})
    batches = _as_list(payload)

    by_status = Counter(str(b.get("status", "unknown")).lower() for b in batches)
    total = len(batches)
    success = by_status.get("success", 0)

    return {
        "timeRange": timeRange,
        "total": total,
        "byStatus": dict(by_status),
        "successRate": round(100 * success / total, 1) if total else None,
    }


async def analyze_batch_errors(client: PlatformClient, *, batchId: str) -> Dict[str, Any]:
    """
    Fetch one batch and summarise its errors.

    Returns:
        batchId, totalErrors, errorsByCode, topError {errorCode, count, percentage}
        and a recommendation for the most common code.
    """

    payload = await client.get(f"{CATALOG}/batches/{batchId}")
    batch = payload.get(batchId) or next(iter(_as_list(payload)), {})
    errors = batch.get("errors") or []

    by_code = Counter(str(e.get("code", "UNKNOWN")) for e in errors)
    total = sum(by_code.values())

    result: Dict[str, Any] = {
        "batchId": batchId,
        "status": batch.get("status"),
        "totalErrors": total,
        "errorsByCode": dict(by_code),
        "topError": None,
        "recommendation": None,
    }

    if total:
        code, count = by_code.most_common(1)[0]
        result["topError"] = {"errorCode": code, "count": count, "percentage": round(100 * count / total)}
        result["recommendation"] = RECOMMENDATIONS.get(code)

    return result


async def list_datasets(client: PlatformClient, *, limit: int = 10) -> Dict[str, Any]:

    payload = await client.get(f"{CATALOG}/dataSets", params={"limit": limit})
    datasets = [
        {"id": d["id"], "name": d.get("name"), "schemaRef": (d.get("schemaRef") or {}).get("id")}
        for d in _as_list(payload)
    ]

    return {"datasets": datasets, "count": len(datasets)}
