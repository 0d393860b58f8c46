from dataclasses import dataclass, field
import numpy as np
from numpy.typing import NDArray
import trimesh

NO_NEIGHBOR = -1  # sentinel for "no triangle on the other side of this edge"


def _as_points(values, width: int) -> NDArray[np.float64]:
    array = np.asarray(values, dtype=np.float64)
    if array.size == 0:
        return np.zeros((0, width), dtype=np.float64)
    if array.ndim != 2 or array.shape[1] != width:
        raise ValueError(f"Expected an N x {width} array, got shape {array.shape}")
    return array


def _as_triples(values) -> NDArray[np.int64]:
    array = np.asarray(values)
    if array.size == 0:
        return np.zeros((0, 3), dtype=np.int64)
    if not np.issubdtype(array.dtype, np.integer):
        raise ValueError(f"Face indices must be integers, got dtype {array.dtype}")
    if array.ndim != 2 or array.shape[1] != 3:
        raise ValueError(f"Expected an F x 3 array of face indices, got shape {array.shape}")
    return array.astype(np.int64)


@dataclass
class TriangleMesh:
    """
    Indexed triangle mesh with independently indexed vertex attributes.

    Positions, normals, texture coordinates and colors each carry their own
    per-face index triples, as produced by OBJ-style readers. Only positions
    and their face indices take part in the topology and mass computations;
    the remaining arrays are stored and passed through.
    """
    vertices: NDArray[np.float64]  # V x 3 array of vertex coordinates
    face_vertex_indices: NDArray[np.int64]  # F x 3 array of vertex *indices* which are face corners
    normals: NDArray[np.float64] = field(default_factory=lambda: np.zeros((0, 3)))
    uvs: NDArray[np.float64] = field(default_factory=lambda: np.zeros((0, 2)))
    colors: NDArray[np.float64] = field(default_factory=lambda: np.zeros((0, 3)))
    face_normal_indices: NDArray[np.int64] = field(default_factory=lambda: np.zeros((0, 3), dtype=np.int64))
    face_uv_indices: NDArray[np.int64] = field(default_factory=lambda: np.zeros((0, 3), dtype=np.int64))
    face_color_indices: NDArray[np.int64] = field(default_factory=lambda: np.zeros((0, 3), dtype=np.int64))

    def __post_init__(self):
        self.vertices = _as_points(self.vertices, 3)
        self.normals = _as_points(self.normals, 3)
        self.uvs = _as_points(self.uvs, 2)
        self.colors = _as_points(self.colors, 3)
        self.face_vertex_indices = _as_triples(self.face_vertex_indices)
        self.face_normal_indices = _as_triples(self.face_normal_indices)
        self.face_uv_indices = _as_triples(self.face_uv_indices)
        self.face_color_indices = _as_triples(self.face_color_indices)

    @property
    def num_triangles(self) -> int:
        return len(self.face_vertex_indices)

    @property
    def num_vertices(self) -> int:
        return len(self.vertices)

    def check_indices(self):
        """
        Verify that every face index array refers into its attribute array.

        An attribute face array may be empty (the attribute is disabled);
        otherwise it must hold one triple per triangle with every index in
        range.

        Raises
        ------
        ValueError
            If an index is negative or out of range, or a face array has
            the wrong number of rows.
        """
        arrays = [
            ("face_vertex_indices", self.face_vertex_indices, len(self.vertices)),
            ("face_normal_indices", self.face_normal_indices, len(self.normals)),
            ("face_uv_indices", self.face_uv_indices, len(self.uvs)),
            ("face_color_indices", self.face_color_indices, len(self.colors)),
        ]
        for name, indices, count in arrays:
            if len(indices) == 0:
                continue
            if name != "face_vertex_indices" and len(indices) != self.num_triangles:
                raise ValueError(
                    f"{name} has {len(indices)} rows but the mesh has {self.num_triangles} triangles"
                )
            low, high = indices.min(), indices.max()
            if low < 0 or high >= count:
                raise ValueError(
                    f"{name} refers to index {low if low < 0 else high}, valid range is 0-{count - 1}"
                )

    def triangle_vertices(self) -> NDArray[np.float64]:
        """Return a T x 3 x 3 array with the corner positions of every triangle."""
        return self.vertices[self.face_vertex_indices]

    def face_normals(self, normalized: bool = True) -> NDArray[np.float64]:
        """
        Geometric normal of each triangle, (v1 - v0) x (v2 - v0).

        Zero-area triangles get a zero normal instead of NaN.
        """
        corners = self.triangle_vertices()
        normals = np.cross(corners[:, 1] - corners[:, 0], corners[:, 2] - corners[:, 0])
        if not normalized:
            return normals
        lengths = np.linalg.norm(normals, axis=1)
        nonzero = lengths > 0.0
        normals[nonzero] /= lengths[nonzero, np.newaxis]
        return normals

    def copy(self) -> "TriangleMesh":
        return TriangleMesh(
            vertices=self.vertices.copy(),
            face_vertex_indices=self.face_vertex_indices.copy(),
            normals=self.normals.copy(),
            uvs=self.uvs.copy(),
            colors=self.colors.copy(),
            face_normal_indices=self.face_normal_indices.copy(),
            face_uv_indices=self.face_uv_indices.copy(),
            face_color_indices=self.face_color_indices.copy(),
        )

    def transform(self, displacement=(0.0, 0.0, 0.0), rotscale=None):
        """Apply p -> rotscale @ p + displacement to positions and rotate normals."""
        matrix = np.eye(3) if rotscale is None else np.asarray(rotscale, dtype=np.float64)
        self.vertices = self.vertices @ matrix.T + np.asarray(displacement, dtype=np.float64)
        if len(self.normals):
            normals = self.normals @ matrix.T
            lengths = np.linalg.norm(normals, axis=1)
            nonzero = lengths > 0.0
            normals[nonzero] /= lengths[nonzero, np.newaxis]
            self.normals = normals
        return self

    @classmethod
    def from_trimesh(cls, mesh: trimesh.Trimesh, load_normals: bool = True, load_uv: bool = True) -> "TriangleMesh":
        """Build a mesh from a trimesh object; trimesh attributes share the vertex indexing."""
        faces = np.asarray(mesh.faces, dtype=np.int64)
        normals = np.zeros((0, 3))
        face_normal_indices = np.zeros((0, 3), dtype=np.int64)
        uvs = np.zeros((0, 2))
        face_uv_indices = np.zeros((0, 3), dtype=np.int64)

        if load_normals and len(faces):
            normals = np.asarray(mesh.vertex_normals, dtype=np.float64)
            face_normal_indices = faces.copy()

        uv = getattr(mesh.visual, "uv", None)
        if load_uv and uv is not None and len(uv) == len(mesh.vertices):
            uvs = np.asarray(uv, dtype=np.float64)
            face_uv_indices = faces.copy()

        return cls(
            vertices=np.asarray(mesh.vertices, dtype=np.float64),
            face_vertex_indices=faces,
            normals=normals,
            uvs=uvs,
            face_normal_indices=face_normal_indices,
            face_uv_indices=face_uv_indices,
        )

    def to_trimesh(self) -> trimesh.Trimesh:
        return trimesh.Trimesh(vertices=self.vertices.copy(), faces=self.face_vertex_indices.copy(), process=False)
