import logging
from pathlib import Path
import trimesh

from data_types import TriangleMesh
from .wavefront import load_wavefront_mesh

logger = logging.getLogger(__name__)


def load_triangle_mesh(path, load_normals: bool = True, load_uv: bool = True) -> TriangleMesh:
    """
    Read a mesh file (OBJ, STL, PLY, ...) into a TriangleMesh.

    OBJ files are read by load_wavefront_mesh, which keeps positions, normals
    and texture coordinates independently indexed as in the file. Other
    formats are read with trimesh without processing, where the attributes
    share the vertex indexing. In both cases coincident vertices are kept as
    they are in the file and can be repaired afterwards with
    deduplication.repair_duplicate_vertices.

    Raises
    ------
    ValueError
        If the file cannot be read as a triangle mesh.
    """
    path = Path(path)
    if path.suffix.lower() == ".obj":
        try:
            triangle_mesh = load_wavefront_mesh(path, load_normals=load_normals, load_uv=load_uv)
        except OSError as e:
            raise ValueError(f"Could not load mesh from {path}: {e}") from e
        logger.info(f"Loaded {path.name}: {triangle_mesh.num_vertices} vertices, "
                    f"{triangle_mesh.num_triangles} triangles")
        return triangle_mesh

    try:
        mesh = trimesh.load_mesh(str(path), process=False)
    except Exception as e:
        raise ValueError(f"Could not load mesh from {path}: {e}") from e

    if not isinstance(mesh, trimesh.Trimesh):
        raise ValueError(f"{path} does not contain a triangle mesh")

    triangle_mesh = TriangleMesh.from_trimesh(mesh, load_normals=load_normals, load_uv=load_uv)
    logger.info(f"Loaded {path.name}: {triangle_mesh.num_vertices} vertices, "
                f"{triangle_mesh.num_triangles} triangles")
    return triangle_mesh
