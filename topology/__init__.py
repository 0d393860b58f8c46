from .edges import Edge, canonical_edge, triangle_edges, build_edge_map, find_pathological_edges
from .adjacency import compute_neighbouring_triangle_map
from .winged_edges import compute_winged_edges
from .boundary_loops import find_boundary_edges, count_boundary_loops
