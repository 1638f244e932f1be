"""
src/app.py

Thin JSON API over the orchestrator and the query poller.

    POST /api/agent/chat      one chat turn (answer or pending approval)
    GET  /api/agent/tools     tool list with approval flags
    POST /api/queries         run SQL, wait up to POLL_TIMEOUT_SECONDS
    GET  /api/queries/{id}    re-check a query
"""


from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

import config
from orchestrator import llm_openai
from orchestrator.models import TurnRequest
from orchestrator.router import process_message
from tools import queries
from tools.catalog import build_registry
from tools.platform import PlatformAPIError, PlatformClient
from tools.registry import ToolRegistry


# Share one HTTP client and registry for the lifetime of the process
@asynccontextmanager
async def lifespan(app: FastAPI):
    config.configure_logging()
    client = PlatformClient()
    app.state.platform = client
    app.state.registry = build_registry(client)
    logger.info("Registered {} tools; LLM configured: {}", len(app.state.registry.list_tools()), llm_openai.is_configured())

    yield
    await client.aclose()


def get_platform(request: Request) -> PlatformClient:
    return request.app.state.platform


def get_registry(request: Request) -> ToolRegistry:
    return request.app.state.registry


def get_llm():
    return llm_openai


class QueryRequest(BaseModel):

    sql: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None


router = APIRouter(prefix="/api")


@router.post("/agent/chat")
async def agent_chat(body: TurnRequest, registry: ToolRegistry = Depends(get_registry), llm=Depends(get_llm)):
    """One turn: plain answer, tool-backed answer, or a pending action to approve."""
    response = await process_message(body, registry=registry, llm=llm)
    return response.model_dump(by_alias=True, exclude_none=True)


@router.get("/agent/tools")
async def agent_tools(registry: ToolRegistry = Depends(get_registry)) -> List[Dict[str, Any]]:
    return [
        {"name": t.name, "description": t.description, "requiresApproval": t.requires_approval}
        for t in registry.list_tools()
    ]


@router.post("/queries")
async def execute_query(body: QueryRequest, client: PlatformClient = Depends(get_platform)):
    """
    Create a query and poll it for completion.
    Still running after the timeout -> the last status plus `message` and `polling: true`.
    """
    if not body.sql or not body.sql.strip():
        raise HTTPException(status_code=400, detail="SQL query is required")

    job = await queries.run_query(client, body.sql, name=body.name, description=body.description)
    return job.model_dump(exclude_none=True)


@router.get("/queries/{query_id}")
async def get_query(query_id: str, client: PlatformClient = Depends(get_platform)):
    job = await queries.get_query(client, query_id)
    return job.model_dump(exclude_none=True)


app = FastAPI(title="Experience Platform Assistant API", lifespan=lifespan)
app.include_router(router)


@app.exception_handler(PlatformAPIError)
async def platform_error_handler(request: Request, exc: PlatformAPIError):
    logger.error("Platform error on {}: {}", request.url.path, exc)
    return JSONResponse(status_code=502, content={"error": str(exc)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Route error on {}", request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.get("/")
async def root():
    return {"message": "Experience Platform Assistant API"}
