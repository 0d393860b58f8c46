from typing import List, Tuple
import networkx as nx

from data_types import NO_NEIGHBOR
from .edges import Edge
from .winged_edges import compute_winged_edges


def find_boundary_edges(mesh) -> List[Edge]:
    """Return the sorted edges that belong to exactly one triangle."""
    winged_edges, _ = compute_winged_edges(mesh, allow_single_wing=True)
    return [edge for edge, (_, second) in winged_edges.items() if second == NO_NEIGHBOR]


def get_connected_components(edges: List[Edge]) -> Tuple[int, List[List[Edge]]]:
    """
    Helper function to get connected components of a graph.
    Returns the number of connected components and the edges of each component.
    """
    graph = nx.Graph()
    graph.add_edges_from(edges)

    component_edges = []
    for component in nx.connected_components(graph):
        component_edges.append(sorted(tuple(sorted(edge)) for edge in graph.subgraph(component).edges()))
    component_edges.sort()

    return len(component_edges), component_edges


def count_boundary_loops(mesh) -> Tuple[int, List[List[Edge]]]:
    """
    Given a mesh, return the boundary loops of the surface.
    A closed surface has none; an open disc has one.
    """
    return get_connected_components(find_boundary_edges(mesh))
