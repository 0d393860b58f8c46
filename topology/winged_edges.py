import logging
from typing import Dict, Tuple

from data_types import NO_NEIGHBOR
from .edges import Edge, build_edge_map, face_array

logger = logging.getLogger(__name__)


def compute_winged_edges(mesh, allow_single_wing: bool = True) -> Tuple[Dict[Edge, Tuple[int, int]], bool]:
    """
    Pair every edge with its one or two incident triangles.

    Interior edges map to (t0, t1) with t0 < t1. Boundary edges map to
    (t0, NO_NEIGHBOR) when allow_single_wing is set and are left out
    otherwise. Edges shared by three or more triangles set the returned
    pathological flag and are left out, since no pairing is meaningful for
    them.
    """
    faces = face_array(mesh)
    edge_map = build_edge_map(faces)

    winged_edges = {}
    num_pathological = 0
    for edge in sorted(edge_map):
        incident = edge_map[edge]
        if len(incident) == 2:
            winged_edges[edge] = (incident[0], incident[1])
        elif len(incident) == 1:
            if allow_single_wing:
                winged_edges[edge] = (incident[0], NO_NEIGHBOR)
        else:
            num_pathological += 1

    if num_pathological:
        logger.warning(f"Skipped {num_pathological} edges shared by more than two triangles")
    return winged_edges, num_pathological > 0
