"""
src/tools/schemas.py — Schema Registry tools
"""


from typing import Any, Dict

from tools.platform import PlatformClient


SCHEMA_REGISTRY = "/data/foundation/schemaregistry"


async def get_schema_stats(client: PlatformClient) -> Dict[str, Any]:

    return await client.get(f"{SCHEMA_REGISTRY}/stats")


async def list_schemas(client: PlatformClient, *, limit: int = 50) -> Dict[str, Any]:
    """Tenant schemas (id + title only)."""

    payload = await client.get(
        f"{SCHEMA_REGISTRY}/tenant/schemas",
        params={"limit": limit},
        accept="application/vnd.adobe.xed-id+json",
    )
    schemas = [{"id": s.get("$id"), "title": s.get("title")} for s in payload.get("results", [])]

    return {"schemas": schemas, "count": len(schemas)}
