"""
Edge keys and the edge -> triangles multi-map shared by the topology builders.
"""

from typing import Dict, List, Tuple, Union
import numpy as np
from numpy.typing import NDArray

from data_types import TriangleMesh

Edge = Tuple[int, int]


def canonical_edge(a: int, b: int) -> Edge:
    """Return the undirected edge (a, b) as (min, max) so both windings compare equal."""
    a, b = int(a), int(b)
    return (a, b) if a <= b else (b, a)


def triangle_edges(face) -> List[Edge]:
    """Canonical edges of a triangle; edge k joins local vertices k and (k + 1) % 3."""
    return [canonical_edge(face[k], face[(k + 1) % 3]) for k in range(3)]


def face_array(mesh: Union[TriangleMesh, NDArray[np.int64]]) -> NDArray[np.int64]:
    """Return the F x 3 vertex index array of a mesh, validating it first."""
    if isinstance(mesh, TriangleMesh):
        mesh.check_indices()
        return mesh.face_vertex_indices
    faces = np.asarray(mesh, dtype=np.int64)
    if faces.size == 0:
        return np.zeros((0, 3), dtype=np.int64)
    if faces.ndim != 2 or faces.shape[1] != 3:
        raise ValueError(f"Expected an F x 3 array of face indices, got shape {faces.shape}")
    if faces.min() < 0:
        raise ValueError("Face indices must be non-negative")
    return faces


def build_edge_map(faces: NDArray[np.int64]) -> Dict[Edge, List[int]]:
    """
    Map every canonical edge to the triangles that use it.

    Triangles are appended in ascending index order, so the lists keep
    insertion order. A degenerate triangle that repeats an edge appears once
    per occurrence.
    """
    edge_map: Dict[Edge, List[int]] = {}
    for face_idx, face in enumerate(faces.tolist()):
        for edge in triangle_edges(face):
            if edge in edge_map:
                edge_map[edge].append(face_idx)
            else:
                edge_map[edge] = [face_idx]
    return edge_map


def find_pathological_edges(mesh_or_edge_map) -> List[Edge]:
    """Return the sorted edges shared by three or more triangles."""
    if isinstance(mesh_or_edge_map, dict):
        edge_map = mesh_or_edge_map
    else:
        edge_map = build_edge_map(face_array(mesh_or_edge_map))
    return sorted(edge for edge, faces in edge_map.items() if len(faces) > 2)
