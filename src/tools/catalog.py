"""
src/tools/catalog.py — the static tool table

build_registry() binds every platform tool to a PlatformClient and registers it
with its JSON schema and approval flag. Tools that create or run something on
the platform are flagged `requires_approval=True`; everything else is read-only.
"""


from functools import partial

from tools import identity, ingestion, queries, sandboxes, schemas, segments
from tools.platform import PlatformClient
from tools.registry import ToolRegistry


def _params(properties=None, required=None):

    return {"properties": properties or {}, "required": required or []}


_LIMIT = {"limit": {"type": "integer", "description": "Maximum number of items to return."}}
_IDENTITY = {
    "namespace": {"type": "string", "description": "Identity namespace code, e.g. ECID or Email."},
    "identity": {"type": "string", "description": "Identity value within the namespace."},
}


def build_registry(client: PlatformClient) -> ToolRegistry:
    """Register every platform tool against `client`."""

    registry = ToolRegistry()

    # Ingestion
    registry.register(
        "get_failed_batches",
        "List the most recent failed ingestion batches.",
        _params(_LIMIT),
        partial(ingestion.get_failed_batches, client),
    )
    registry.register(
        "get_batch_stats",
        "Count ingestion batches per status over a time window.",
        _params({"timeRange": {"type": "string", "description": "Window such as 24h or 7d."}}),
        partial(ingestion.get_batch_stats, client),
    )
    registry.register(
        "analyze_batch_errors",
        "Group the errors of one batch by error code and suggest a fix.",
        _params({"batchId": {"type": "string"}}, ["batchId"]),
        partial(ingestion.analyze_batch_errors, client),
    )
    registry.register(
        "list_datasets",
        "List datasets in the current sandbox.",
        _params(_LIMIT),
        partial(ingestion.list_datasets, client),
    )

    # Schemas
    registry.register(
        "get_schema_stats",
        "Schema Registry statistics (counts of schemas, field groups, classes).",
        _params(),
        partial(schemas.get_schema_stats, client),
    )
    registry.register(
        "list_schemas",
        "List tenant schemas.",
        _params(_LIMIT),
        partial(schemas.list_schemas, client),
    )

    # Segments
    registry.register(
        "get_segment_stats",
        "Count segments per lifecycle state (published, draft, ...).",
        _params(),
        partial(segments.get_segment_stats, client),
    )
    registry.register(
        "list_segments",
        "List segment definitions.",
        _params(_LIMIT),
        partial(segments.list_segments, client),
    )
    registry.register(
        "create_segment",
        "Create a segment definition from a PQL expression.",
        _params(
            {
                "name": {"type": "string"},
                "expression": {"type": "string", "description": "PQL expression."},
                "description": {"type": "string"},
            },
            ["name", "expression"],
        ),
        partial(segments.create_segment, client),
        requires_approval=True,
    )

    # Identity & profiles
    registry.register(
        "list_namespaces",
        "List identity namespaces.",
        _params(),
        partial(identity.list_namespaces, client),
    )
    registry.register(
        "get_identity_graph",
        "Show the identities linked to one identity.",
        _params(_IDENTITY, ["namespace", "identity"]),
        partial(identity.get_identity_graph, client),
    )
    registry.register(
        "lookup_profile",
        "Fetch the merged customer profile for one identity.",
        _params(_IDENTITY, ["namespace", "identity"]),
        partial(identity.lookup_profile, client),
    )

    # Sandboxes
    registry.register(
        "list_sandboxes",
        "List sandboxes and show which one is active.",
        _params(),
        partial(sandboxes.list_sandboxes, client),
    )

    # Queries
    registry.register(
        "list_queries",
        "List recent Query Service queries.",
        _params(_LIMIT),
        partial(queries.list_queries, client),
    )
    registry.register(
        "execute_sql_query",
        "Run a SQL query against the data lake and wait briefly for the result.",
        _params({"sql": {"type": "string"}, "name": {"type": "string"}}, ["sql"]),
        partial(queries.execute_sql_query, client),
        requires_approval=True,
    )

    return registry
