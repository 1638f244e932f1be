"""
src/tools/segments.py — segmentation tools

Provides:
- get_segment_stats(): totals per lifecycle state
- list_segments(...): recent segment definitions
- create_segment(...): create a PQL segment definition (mutating: needs approval)
"""


from collections import Counter
from typing import Any, Dict

from tools.platform import PlatformClient


SEGMENTS = "/data/core/ups/segment/definitions"
PROFILE_SCHEMA = "_xdm.context.profile"


async def get_segment_stats(client: PlatformClient) -> Dict[str, Any]:

    payload = await client.get(SEGMENTS, params={"limit": 100})
    segments = payload.get("segments", [])
    by_state = Counter(str(s.get("lifecycleState", "unknown")).lower() for s in segments)
    total = (payload.get("page") or {}).get("totalCount", len(segments))

    return {
        "total": total,
        "byState": dict(by_state),
        "published": by_state.get("published", 0),
        "draft": by_state.get("draft", 0),
    }


async def list_segments(client: PlatformClient, *, limit: int = 20) -> Dict[str, Any]:

    payload = await client.get(SEGMENTS, params={"limit": limit})
    segments = [
        {"id": s.get("id"), "name": s.get("name"), "lifecycleState": s.get("lifecycleState")}
        for s in payload.get("segments", [])
    ]

    return {"segments": segments, "count": len(segments)}


async def create_segment(client: PlatformClient, *, name: str, expression: str, description: str = "") -> Dict[str, Any]:
    """
    Create a segment definition from a PQL expression.

    Args:
        name: Display name of the segment.
        expression: PQL text, e.g. `homeAddress.countryCode = "US"`.
        description: Optional free text.
    """

    body = {
        "name": name,
        "description": description,
        "schema": {"name": PROFILE_SCHEMA},
        "expression": {"type": "PQL", "format": "pql/text", "value": expression},
    }

    return await client.post(SEGMENTS, json=body)
