"""
Offset surfaces of triangle meshes.

Each vertex is moved so that the plane of every triangle around it shifts by
the same distance along its own normal (X. Qu and B. Stucker, "A 3D surface
offset method for STL-format models").
"""

import logging
from typing import List
import numpy as np
from numpy.typing import NDArray
from tqdm import tqdm

from data_types import TriangleMesh
from .linalg import solve_linear_system

logger = logging.getLogger(__name__)


def build_vertex_triangle_map(faces: NDArray[np.int64], num_vertices: int) -> List[List[int]]:
    """Return, for each vertex, the indices of the triangles that use it."""
    vertex_triangles = [[] for _ in range(num_vertices)]
    for face_idx, face in enumerate(faces.tolist()):
        for vertex_idx in face:
            vertex_triangles[vertex_idx].append(face_idx)
    return vertex_triangles


def compute_vertex_offsets(mesh: TriangleMesh, show_progress: bool = False) -> NDArray[np.float64]:
    """
    Compute the unit-offset displacement of every vertex.

    For a vertex with incident unit normals n_1..n_k the weights x solve
    G x = 1 with G_jk = n_j . n_k, and the displacement is sum_j x_j n_j, so
    its projection on every incident normal is 1. Coplanar or repeated
    normals make G singular; the minimum-norm solution is used then.
    Vertices that belong to no triangle get a zero displacement.
    """
    mesh.check_indices()
    face_normals = mesh.face_normals(normalized=True)
    vertex_triangles = build_vertex_triangle_map(mesh.face_vertex_indices, mesh.num_vertices)

    offsets = np.zeros((mesh.num_vertices, 3), dtype=np.float64)
    for vertex_idx in tqdm(range(mesh.num_vertices), desc="Offsetting vertices", disable=not show_progress):
        triangles = vertex_triangles[vertex_idx]
        if not triangles:
            continue
        normals = face_normals[triangles]
        gram = normals @ normals.T
        weights = solve_linear_system(gram, np.ones(len(triangles)))
        offsets[vertex_idx] = weights @ normals

    return offsets


def make_offset(mesh: TriangleMesh, offset: float, show_progress: bool = False) -> TriangleMesh:
    """
    Inflate (offset > 0) or deflate (offset < 0) the surface in place.

    All displacements are computed from the original positions before any
    vertex is moved. Returns the same mesh.
    """
    if mesh.num_triangles == 0:
        logger.warning("Mesh has no triangles, nothing to offset")
        return mesh

    offsets = compute_vertex_offsets(mesh, show_progress=show_progress)
    mesh.vertices = mesh.vertices + offsets * offset

    logger.debug(f"Offset {mesh.num_vertices} vertices by {offset}, "
                 f"largest displacement {np.abs(offsets * offset).max():.6g}")
    return mesh
