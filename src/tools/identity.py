"""
src/tools/identity.py — identity & profile tools

Provides:
- list_namespaces(): identity namespaces in the sandbox
- get_identity_graph(...): identities linked to one identity
- lookup_profile(...): merged profile for one identity

A very large identity cluster usually means a shared device (kiosk, family
tablet) stitched many people together; we flag it.
"""


from typing import Any, Dict

from tools.platform import PlatformClient


SHARED_DEVICE_THRESHOLD = 30


async def list_namespaces(client: PlatformClient) -> Dict[str, Any]:

    payload = await client.get("/data/core/idnamespace/identities")
    namespaces = [{"id": n.get("id"), "code": n.get("code"), "name": n.get("name")} for n in payload or []]

    return {"namespaces": namespaces, "count": len(namespaces)}


async def get_identity_graph(client: PlatformClient, *, namespace: str, identity: str) -> Dict[str, Any]:

    payload = await client.get("/data/core/identity/cluster/members", params={"namespace": namespace, "id": identity})
    members = payload.get("members", [])

    return {
        "inputIdentity": {"namespace": namespace, "identity": identity},
        "members": members,
        "isSharedDevice": len(members) > SHARED_DEVICE_THRESHOLD,
    }


async def lookup_profile(client: PlatformClient, *, namespace: str, identity: str) -> Dict[str, Any]:

    return await client.get(
        "/data/core/ups/access/entities",
        params={"schema.name": "_xdm.context.profile", "entityId": identity, "entityIdNS": namespace},
    )
