import logging
from pathlib import Path
import numpy as np

from data_types import TriangleMesh

logger = logging.getLogger(__name__)


def _parse_floats(vals, width: int, minimum=None):
    # Missing trailing components (e.g. "vt u") read as 0.0, extra ones (e.g. "v x y z w") are ignored
    minimum = width if minimum is None else minimum
    if len(vals) - 1 < minimum:
        raise ValueError(f"expected at least {minimum} values")
    values = [float(x) for x in vals[1:width + 1]]
    return values + [0.0] * (width - len(values))


def _resolve_index(token: str, count: int) -> int:
    # OBJ indices are 1-based; negative ones count back from the last record read so far
    index = int(token)
    if index < 0:
        return count + index
    return index - 1


def load_wavefront_mesh(path, load_normals: bool = True, load_uv: bool = True) -> TriangleMesh:
    """
    Read a Wavefront OBJ file keeping its v, vt and vn records independently indexed.

    Every `f` record becomes one triangle, or a fan of triangles for polygons.
    Position, texture and normal indices are taken from the `v/vt/vn` corners
    as they are in the file, so no vertex is split or merged. A texture or
    normal index array is only filled when every face corner carries one.

    Raises
    ------
    ValueError
        If a record cannot be parsed, a face has fewer than three corners or
        a face index is out of range.
    """
    path = Path(path)
    vertices, uvs, normals = [], [], []
    face_vertex_indices, face_uv_indices, face_normal_indices = [], [], []
    missing_uv = missing_normal = False

    with open(path, "r") as f:
        for line_number, line in enumerate(f, start=1):
            vals = line.split()
            if not vals:
                continue
            try:
                if vals[0] == "v":
                    vertices.append(_parse_floats(vals, 3))
                elif vals[0] == "vt":
                    uvs.append(_parse_floats(vals, 2, minimum=1))
                elif vals[0] == "vn":
                    normals.append(_parse_floats(vals, 3))
                elif vals[0] == "f":
                    if len(vals) < 4:
                        raise ValueError("face with fewer than three corners")
                    v_corners, t_corners, n_corners = [], [], []
                    for corner in vals[1:]:
                        fields = corner.split("/")
                        v_corners.append(_resolve_index(fields[0], len(vertices)))
                        if len(fields) > 1 and fields[1]:
                            t_corners.append(_resolve_index(fields[1], len(uvs)))
                        if len(fields) > 2 and fields[2]:
                            n_corners.append(_resolve_index(fields[2], len(normals)))
                    missing_uv |= len(t_corners) != len(v_corners)
                    missing_normal |= len(n_corners) != len(v_corners)

                    # Fan triangulation around the first corner
                    for k in range(1, len(v_corners) - 1):
                        face_vertex_indices.append([v_corners[0], v_corners[k], v_corners[k + 1]])
                        if not missing_uv:
                            face_uv_indices.append([t_corners[0], t_corners[k], t_corners[k + 1]])
                        if not missing_normal:
                            face_normal_indices.append([n_corners[0], n_corners[k], n_corners[k + 1]])
            except (ValueError, IndexError) as e:
                raise ValueError(f"{path}:{line_number}: could not parse '{line.strip()}': {e}") from e

    if missing_uv and uvs:
        logger.warning(f"{path.name}: some faces have no texture coordinates, UVs are dropped")
    if missing_normal and normals:
        logger.warning(f"{path.name}: some faces have no normal indices, normals are dropped")
    if missing_uv or not load_uv:
        uvs, face_uv_indices = [], []
    if missing_normal or not load_normals:
        normals, face_normal_indices = [], []

    mesh = TriangleMesh(
        vertices=np.array(vertices, dtype=np.float64).reshape(-1, 3),
        face_vertex_indices=np.array(face_vertex_indices, dtype=np.int64).reshape(-1, 3),
        normals=np.array(normals, dtype=np.float64).reshape(-1, 3),
        uvs=np.array(uvs, dtype=np.float64).reshape(-1, 2),
        face_normal_indices=np.array(face_normal_indices, dtype=np.int64).reshape(-1, 3),
        face_uv_indices=np.array(face_uv_indices, dtype=np.int64).reshape(-1, 3),
    )
    mesh.check_indices()
    return mesh
