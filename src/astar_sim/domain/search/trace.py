from enum import Enum

from astar_sim.domain.search.astar import PathSearch, SearchStatus


class NodeState(Enum):
    DEFAULT = "default"
    VISITED = "visited"
    CURRENT = "current"
    CHECKING = "checking"
    FINAL = "final"


class EdgeState(Enum):
    DEFAULT = "default"
    CHECKING = "checking"
    CHOSEN = "chosen"
    CURRENT = "current"
    FINAL = "final"


class SearchTrace:
    """Display classification of nodes and edges for a running search.

    Call ``observe`` after every search step. ``scanning`` selects the second
    half of a step's display, where the current node checks its neighbors.
    """

    def __init__(self, search: PathSearch):
        self.search = search
        self._visited: dict[str, None] = {}
        self.observe()

    @property
    def visited(self) -> tuple[str, ...]:
        return tuple(self._visited)

    def observe(self) -> None:
        self._visited.setdefault(self.search.current.name, None)

    def states(self, *, scanning: bool = False) -> tuple[dict[str, NodeState], dict[int, EdgeState]]:
        """Node states by name, edge states by index into ``graph.edges``."""
        graph = self.search.graph
        edge_list = graph.edges
        nodes = {n.name: NodeState.DEFAULT for n in graph.nodes}
        edges = dict.fromkeys(range(len(edge_list)), EdgeState.DEFAULT)

        for name in self._visited:
            if nodes.get(name) is not NodeState.VISITED:
                self._mark_path(name, NodeState.VISITED, EdgeState.CHOSEN, nodes, edges, edge_list)

        current = self.search.current.name
        self._mark_path(current, NodeState.CURRENT, EdgeState.CURRENT, nodes, edges, edge_list)

        if self.search.status is SearchStatus.FOUND:
            goal = self.search.goal.name
            self._mark_path(goal, NodeState.FINAL, EdgeState.FINAL, nodes, edges, edge_list)
        elif scanning and not self.search.is_terminal:
            nodes[current] = NodeState.CHECKING
            parent = self.search.came_from.get(current)
            for i, e in enumerate(edge_list):
                if e.touches(current) and e.other(current).name != parent:
                    edges[i] = EdgeState.CHECKING

        return nodes, edges

    def node_states(self, *, scanning: bool = False) -> dict[str, NodeState]:
        return self.states(scanning=scanning)[0]

    def edge_states(self, *, scanning: bool = False) -> dict[int, EdgeState]:
        return self.states(scanning=scanning)[1]

    def _mark_path(self, name, node_state, edge_state, nodes, edges, edge_list) -> None:
        came_from = self.search.came_from
        seen = set()
        while name is not None and name not in seen:
            seen.add(name)
            if name in nodes:
                nodes[name] = node_state
            parent = came_from.get(name)
            if parent is None:
                return
            for i, e in enumerate(edge_list):
                if e.joins(name, parent):
                    edges[i] = edge_state
            name = parent
