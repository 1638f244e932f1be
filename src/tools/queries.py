"""
src/tools/queries.py — Query Service tools

Provides:
- list_queries(...): recent queries
- submit_query(...) / get_query(...): create a query job, re-read its status
- run_query(...): submit + bounded poll (see tools.poller)
- execute_sql_query(...): the agent tool around run_query (mutating: needs approval)
"""


import time
from typing import Any, Dict, Optional

import config
from tools.platform import PlatformClient
from tools.poller import Job, run_to_completion


QUERIES = "/data/foundation/query/queries"


async def list_queries(client: PlatformClient, *, limit: int = 10) -> Dict[str, Any]:

    payload = await client.get(QUERIES, params={"limit": limit, "orderby": "-created"})
    queries = payload.get("queries", [])

    return {"queries": queries, "count": len(queries)}


async def submit_query(client: PlatformClient, sql: str, *, name: Optional[str] = None, description: Optional[str] = None) -> Job:

    body = {
        "dbName": config.DEFAULT_QUERY_DB,
        "sql": sql,
        "name": name or f"Query_{int(time.time() * 1000)}",
        "description": description or "Executed from the platform assistant",
    }

    return Job.model_validate(await client.post(QUERIES, json=body))


async def get_query(client: PlatformClient, query_id: str) -> Job:

    return Job.model_validate(await client.get(f"{QUERIES}/{query_id}"))


async def run_query(
        client: PlatformClient,
        sql: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        poll_interval: float = config.POLL_INTERVAL_SECONDS,
        timeout: float = config.POLL_TIMEOUT_SECONDS,
) -> Job:
    """
    Submit `sql` and wait (bounded) for it to finish.

    Raises:
        ValueError: empty SQL. Nothing is submitted in that case.
    """

    if not sql or not sql.strip():
        raise ValueError("SQL query is required")

    return await run_to_completion(
        lambda: submit_query(client, sql, name=name, description=description),
        lambda query_id: get_query(client, query_id),
        poll_interval=poll_interval,
        timeout=timeout,
    )


async def execute_sql_query(client: PlatformClient, *, sql: str, name: Optional[str] = None) -> Dict[str, Any]:

    job = await run_query(client, sql, name=name)

    return job.model_dump(exclude_none=True)
