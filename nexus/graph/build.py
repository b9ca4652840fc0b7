"""
Workflow graph construction.

Builds the state machine that plans a request, runs the chosen execution
mode, and synthesizes and evaluates the answer:

    START -> route_entry
      -> "compact" -> plan ----\
      -> "restore" ------------> dispatch -> route_by_mode
           PARALLEL   -> Send x N -> agent_task -> parallel_join -> synthesize
           SEQUENTIAL -> sequential_step -> route_after_step
                           -> sequential_step (next step)
                           -> END (paused)
                           -> synthesize
           LOOP       -> refinement_loop -> synthesize
           DIRECT     -> direct -> synthesize
    synthesize -> evaluate -> END
"""

from langgraph.graph import StateGraph, START, END

from nexus.graph.nodes import WorkflowNodes
from nexus.graph.router import (
    DISPATCH_TARGETS,
    route_after_step,
    route_by_mode,
    route_entry,
)
from nexus.graph.state import WorkflowState


def create_workflow_graph(nodes: WorkflowNodes):
    """
    Create and compile the workflow graph.

    Args:
        nodes: Node functions bound to the run's collaborators

    Returns:
        Compiled LangGraph application ready for execution.
    """
    graph = StateGraph(WorkflowState)

    # Planning phase
    graph.add_node("compact", nodes.compact)
    graph.add_node("plan", nodes.plan)
    graph.add_node("restore", nodes.restore)
    graph.add_node("dispatch", nodes.dispatch)

    # Execution modes
    graph.add_node("agent_task", nodes.agent_task)
    graph.add_node("parallel_join", nodes.parallel_join)
    graph.add_node("sequential_step", nodes.sequential_step)
    graph.add_node("refinement_loop", nodes.refinement_loop)
    graph.add_node("direct", nodes.direct)

    # Final phases
    graph.add_node("synthesize", nodes.synthesize)
    graph.add_node("evaluate", nodes.evaluate)

    # Fresh runs plan; resumed runs restore the checkpoint
    graph.add_conditional_edges(
        START,
        route_entry,
        {"compact": "compact", "restore": "restore"},
    )
    graph.add_edge("compact", "plan")
    graph.add_edge("plan", "dispatch")
    graph.add_edge("restore", "dispatch")

    graph.add_conditional_edges("dispatch", route_by_mode, DISPATCH_TARGETS)

    # Parallel fan-in
    graph.add_edge("agent_task", "parallel_join")
    graph.add_edge("parallel_join", "synthesize")

    graph.add_conditional_edges(
        "sequential_step",
        route_after_step,
        {
            "sequential_step": "sequential_step",
            "synthesize": "synthesize",
            END: END,
        },
    )

    graph.add_edge("refinement_loop", "synthesize")
    graph.add_edge("direct", "synthesize")

    graph.add_edge("synthesize", "evaluate")
    graph.add_edge("evaluate", END)

    app = graph.compile()

    return app
