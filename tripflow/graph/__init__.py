"""Generic workflow graph engine used by the planning and recommendation pipelines."""

from tripflow.graph.engine import END, CompiledWorkflow, ConditionalEdge, WorkflowGraph

__all__ = ["END", "CompiledWorkflow", "ConditionalEdge", "WorkflowGraph"]
