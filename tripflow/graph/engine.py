"""
Workflow graph engine.

A WorkflowGraph is an explicit value: a table of named async node
functions plus plain and conditional edges. compile() turns it into a
LangGraph StateGraph in which every node is instrumented so that it:

- logs entry and exit with the session/graph/node prefix
- validates its partial update by merging it into the state
- records an exception on execution.errors instead of halting the run
- appends {node, status, duration_ms} to metadata["execution_history"]

State schemas must be pydantic models carrying `session_id`,
`execution` (ExecutionStatus) and `metadata` fields. Nodes run strictly
one at a time along the chosen path.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Set, Type

from langgraph.graph import END, StateGraph
from pydantic import BaseModel

from tripflow.shared.logging.config import log_state_transition
from tripflow.shared.schemas.base import merge_state


logger = logging.getLogger(__name__)

NodeFn = Callable[[Any], Awaitable[Dict[str, Any]]]
Predicate = Callable[[Any], str]

_REQUIRED_FIELDS = ("session_id", "execution", "metadata")


@dataclass
class ConditionalEdge:
    """Predicate-selected transition: predicate(state) returns a key of routes."""

    predicate: Predicate
    routes: Dict[str, str]


class WorkflowGraph:
    """
    Args:
        name: Graph name used in log prefixes and execution history
        state_schema: Pydantic model class of the state threaded through nodes
    """

    def __init__(self, name: str, state_schema: Type[BaseModel]):
        missing = [f for f in _REQUIRED_FIELDS if f not in state_schema.model_fields]
        if missing:
            raise ValueError(f"{state_schema.__name__} is missing required fields: {missing}")
        self.name = name
        self.state_schema = state_schema
        self.nodes: Dict[str, NodeFn] = {}
        self.edges: Dict[str, str] = {}
        self.conditional_edges: Dict[str, ConditionalEdge] = {}
        self.entry: Optional[str] = None

    def add_node(self, name: str, fn: NodeFn) -> "WorkflowGraph":
        if name == END or name.startswith("__"):
            raise ValueError(f"Reserved node name: {name}")
        if name in self.nodes:
            raise ValueError(f"Node '{name}' already exists in graph '{self.name}'")
        self.nodes[name] = fn
        return self

    def add_edge(self, source: str, target: str) -> "WorkflowGraph":
        if source in self.edges or source in self.conditional_edges:
            raise ValueError(f"Node '{source}' already has an outgoing edge")
        self.edges[source] = target
        return self

    def add_conditional_edge(
        self, source: str, predicate: Predicate, routes: Dict[str, str]
    ) -> "WorkflowGraph":
        if source in self.edges or source in self.conditional_edges:
            raise ValueError(f"Node '{source}' already has an outgoing edge")
        self.conditional_edges[source] = ConditionalEdge(predicate, dict(routes))
        return self

    def set_entry(self, name: str) -> "WorkflowGraph":
        self.entry = name
        return self

    def successors(self, name: str) -> Set[str]:
        if name in self.edges:
            return {self.edges[name]}
        if name in self.conditional_edges:
            return set(self.conditional_edges[name].routes.values())
        return set()

    def validate(self) -> None:
        """
        Check the topology: an entry node, exactly one outgoing edge per
        node, only known targets, every node reachable, END reachable.

        Raises:
            ValueError: Describing the first problem found
        """
        if self.entry is None or self.entry not in self.nodes:
            raise ValueError(f"Graph '{self.name}' has no valid entry node")

        for name in self.nodes:
            targets = self.successors(name)
            if not targets:
                raise ValueError(f"Node '{name}' has no outgoing edge")
            unknown = [t for t in targets if t != END and t not in self.nodes]
            if unknown:
                raise ValueError(f"Node '{name}' routes to unknown node(s): {unknown}")

        for source in list(self.edges) + list(self.conditional_edges):
            if source not in self.nodes:
                raise ValueError(f"Edge from unknown node '{source}'")

        seen: Set[str] = set()
        frontier = [self.entry]
        while frontier:
            current = frontier.pop()
            if current in seen or current == END:
                continue
            seen.add(current)
            frontier.extend(self.successors(current))

        unreachable = set(self.nodes) - seen
        if unreachable:
            raise ValueError(f"Unreachable node(s) in graph '{self.name}': {sorted(unreachable)}")
        if not any(END in self.successors(n) for n in seen):
            raise ValueError(f"Graph '{self.name}' never reaches END")

    def _instrument(self, name: str, fn: NodeFn) -> NodeFn:
        graph_name = self.name

        async def node(state):
            session_id = state.session_id or "unknown"
            _log = f"[session={session_id}] [graph={graph_name}] [node={name}] "
            logger.info(
                f"{_log}Entering node | step={state.execution.current_step}, "
                f"progress={state.execution.progress}"
            )

            started = time.perf_counter()
            status = "ok"
            try:
                update = await fn(state) or {}
                merged = merge_state(state, update)
            except Exception as e:
                logger.exception(f"{_log}Node failed: {e}")
                status = "failed"
                update = {"execution": state.execution.with_error(
                    f"{name}: {type(e).__name__}: {e}"
                )}
                merged = merge_state(state, update)
            duration_ms = int((time.perf_counter() - started) * 1000)

            history = list(merged.metadata.get("execution_history", []))
            history.append({"node": name, "status": status, "duration_ms": duration_ms})

            result = {key: getattr(merged, key) for key in update}
            result["metadata"] = {**merged.metadata, "execution_history": history}

            logger.info(
                f"{_log}Exiting node | status={status}, duration={duration_ms}ms, "
                f"progress={merged.execution.progress}"
            )
            return result

        node.__name__ = f"{graph_name}_{name}"
        return node

    def _instrument_predicate(self, source: str, predicate: Predicate) -> Predicate:
        graph_name = self.name

        def route(state):
            choice = predicate(state)
            logger.info(
                f"[session={state.session_id or 'unknown'}] [graph={graph_name}] "
                f"[router={source}] -> {choice}"
            )
            return choice

        return route

    def compile(self, recursion_limit: int = 25) -> "CompiledWorkflow":
        """Validate the topology and build the executable LangGraph app."""
        self.validate()

        builder = StateGraph(self.state_schema)
        for name, fn in self.nodes.items():
            builder.add_node(name, self._instrument(name, fn))
        builder.set_entry_point(self.entry)
        for source, target in self.edges.items():
            builder.add_edge(source, target)
        for source, edge in self.conditional_edges.items():
            builder.add_conditional_edges(
                source, self._instrument_predicate(source, edge.predicate), edge.routes
            )

        return CompiledWorkflow(self, builder.compile(), recursion_limit)


class CompiledWorkflow:
    """Executable form of a WorkflowGraph."""

    def __init__(self, graph: WorkflowGraph, app, recursion_limit: int):
        self.graph = graph
        self.app = app
        self.recursion_limit = recursion_limit

    @property
    def name(self) -> str:
        return self.graph.name

    async def run(self, state: BaseModel) -> BaseModel:
        """
        Execute the graph from its entry node to END.

        Returns:
            The terminal state as an instance of the graph's state schema
        """
        schema = self.graph.state_schema
        if not isinstance(state, schema):
            state = schema.model_validate(state)

        log_state_transition("workflow_start", state, extra={"graph": self.name}, logger=logger)
        result = await self.app.ainvoke(
            state.model_dump(),
            config={"recursion_limit": self.recursion_limit},
        )
        final = schema.model_validate(result)
        log_state_transition(
            "workflow_complete",
            final,
            extra={
                "graph": self.name,
                "nodes_run": len(final.metadata.get("execution_history", [])),
            },
            logger=logger,
        )
        return final
