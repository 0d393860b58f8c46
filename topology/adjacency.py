import logging
from typing import Tuple
import numpy as np
from numpy.typing import NDArray

from data_types import NO_NEIGHBOR
from .edges import build_edge_map, face_array, triangle_edges

logger = logging.getLogger(__name__)


def compute_neighbouring_triangle_map(mesh) -> Tuple[NDArray[np.int64], bool]:
    """
    Find the triangle on the other side of each edge of every triangle.

    Parameters
    ----------
    mesh : TriangleMesh or NDArray[np.int64]
        The mesh, or its F x 3 array of vertex indices.

    Returns
    -------
    tri_map : NDArray[np.int64]
        F x 4 array of rows [t, n0, n1, n2], where nk is the neighbour across
        the edge between local vertices k and (k + 1) % 3, or NO_NEIGHBOR on a
        boundary edge.
    pathological : bool
        True if some edge is shared by more than two triangles. The neighbour
        chosen across such an edge is the lowest-indexed other triangle.
    """
    faces = face_array(mesh)
    edge_map = build_edge_map(faces)

    tri_map = np.full((len(faces), 4), NO_NEIGHBOR, dtype=np.int64)
    tri_map[:, 0] = np.arange(len(faces))

    pathological_edges = set()
    for face_idx, face in enumerate(faces.tolist()):
        for k, edge in enumerate(triangle_edges(face)):
            incident = edge_map[edge]
            if len(incident) > 2:
                pathological_edges.add(edge)
            for other_idx in incident:
                if other_idx != face_idx:
                    tri_map[face_idx, k + 1] = other_idx
                    break

    if pathological_edges:
        logger.warning(f"{len(pathological_edges)} edges are shared by more than two triangles")
    return tri_map, bool(pathological_edges)
