"""
src/tools/sandboxes.py — sandbox tools
"""


from typing import Any, Dict

from tools.platform import PlatformClient


async def list_sandboxes(client: PlatformClient) -> Dict[str, Any]:

    payload = await client.get("/data/foundation/sandbox-management/sandboxes")
    sandboxes = [
        {"name": s.get("name"), "title": s.get("title"), "type": s.get("type"), "state": s.get("state")}
        for s in payload.get("sandboxes", [])
    ]

    return {"sandboxes": sandboxes, "count": len(sandboxes), "current": client.sandbox}
