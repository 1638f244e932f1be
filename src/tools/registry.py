"""
src/tools/registry.py — tool registry (name -> schema, approval flag, executor)

The registry is the only way a tool gets executed. It is built once at start-up
and never changes afterwards, so it can be shared across concurrent requests.

Usage:
    registry = ToolRegistry()
    registry.register("list_sandboxes", "List sandboxes.", {}, executor)
    data = await registry.execute("list_sandboxes", {})
"""


from typing import Any, Awaitable, Callable, Dict, List, Optional
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field


Executor = Callable[..., Awaitable[Any]]


class ToolExecutionError(Exception):
    """Raised when a tool's executor fails (or the tool does not exist)."""

    def __init__(self, tool: str, cause: BaseException):

        super().__init__(f"{tool}: {cause}")
        self.tool = tool
        self.cause = cause


class ToolDefinition(BaseModel):

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: Dict[str, Any] = Field(default_factory=dict)
    requires_approval: bool = False


def _tool_spec(definition: ToolDefinition) -> Dict[str, Any]:
    """Build an OpenAI function spec."""

    return {
        "type": "function",
        "function": {
            "name": definition.name,
            "description": definition.description,
            "parameters": {
                "type": "object",
                "properties": definition.parameters.get("properties", {}),
                "required": definition.parameters.get("required", []),
            },
        },
    }


class ToolRegistry:

    def __init__(self):

        self._definitions: Dict[str, ToolDefinition] = {}
        self._executors: Dict[str, Executor] = {}

    def register(
            self,
            name: str,
            description: str,
            parameters: Dict[str, Any],
            executor: Executor,
            *,
            requires_approval: bool = False,
    ) -> ToolDefinition:

        if name in self._definitions:
            raise ValueError(f"Tool already registered: {name}")

        definition = ToolDefinition(
            name=name,
            description=description,
            parameters=parameters,
            requires_approval=requires_approval,
        )
        self._definitions[name] = definition
        self._executors[name] = executor

        return definition

    def definitions(self) -> List[Dict[str, Any]]:
        """JSON schemas describing the tools we expose to the model."""

        return [_tool_spec(d) for d in self._definitions.values()]

    def list_tools(self) -> List[ToolDefinition]:

        return list(self._definitions.values())

    def get(self, name: str) -> Optional[ToolDefinition]:

        return self._definitions.get(name)

    def requires_approval(self, name: str) -> bool:

        definition = self._definitions.get(name)

        return bool(definition and definition.requires_approval)

    async def execute(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Any:
        """
        Run the executor bound to `name` with keyword `arguments`.

        Raises:
            ToolExecutionError: unknown tool, or the executor raised. The original
            exception is kept on `.cause`.
        """

        executor = self._executors.get(name)
        if executor is None:
            raise ToolExecutionError(name, LookupError(f"Unknown tool: {name}"))

        logger.info("Executing tool {} with {}", name, arguments or {})
        try:
            return await executor(**(arguments or {}))
        except Exception as e:
            logger.warning("Tool {} failed: {}", name, e)
            raise ToolExecutionError(name, e) from e
