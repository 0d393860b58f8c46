import itertools
import logging
from typing import Tuple
import numpy as np
from numpy.typing import NDArray
from tqdm import tqdm

from data_types import TriangleMesh

logger = logging.getLogger(__name__)

DEDUP_METHODS = ("scan", "grid")

# Largest cell coordinate that is exact in float64 and leaves room for the +-1 neighbour offsets in int64
_MAX_CELL_COORDINATE = 2.0 ** 52

_NEIGHBOR_CELL_OFFSETS = np.array(list(itertools.product((-1, 0, 1), repeat=3)), dtype=np.int64)


def merge_duplicate_vertices(
    vertices: NDArray[np.float64],
    tolerance: float,
    method: str = "scan",
    show_progress: bool = False,
) -> Tuple[NDArray[np.float64], NDArray[np.int64], int]:
    """
    Collapse vertices that lie closer than a tolerance to an earlier vertex.

    Vertices are visited in order. A vertex whose squared distance to some
    already kept vertex is below `tolerance` (or exactly zero) is mapped to
    the first such kept vertex; otherwise it is kept. Two vertices whose
    squared distance equals a positive tolerance are not merged.

    Parameters
    ----------
    vertices : NDArray[np.float64]
        V x 3 array of vertex positions.
    tolerance : float
        Threshold on the *squared* distance. 0 merges exact duplicates only.
    method : str
        "scan" compares against every kept vertex; "grid" buckets the kept
        vertices in a spatial hash of cell size sqrt(tolerance). Both give
        the same result.
    show_progress : bool
        Show a tqdm progress bar.

    Returns
    -------
    new_vertices : NDArray[np.float64]
        K x 3 array of kept vertices, in first-seen order.
    new_indices : NDArray[np.int64]
        Length V array mapping each old vertex index to its new index.
    num_merged : int
        V - K, the number of vertices folded into an earlier one.
    """
    if tolerance < 0:
        raise ValueError(f"Merge tolerance must be non-negative, got {tolerance}")
    if method not in DEDUP_METHODS:
        raise ValueError(f"Unknown deduplication method '{method}', expected one of {DEDUP_METHODS}")

    vertices = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
    if method == "grid":
        kept_indices, new_indices = _merge_with_grid(vertices, tolerance, show_progress)
    else:
        kept_indices, new_indices = _merge_with_scan(vertices, tolerance, show_progress)

    new_vertices = vertices[kept_indices]
    return new_vertices, new_indices, len(vertices) - len(new_vertices)


def _merge_with_scan(vertices, tolerance, show_progress):
    kept = np.empty_like(vertices)
    kept_indices = []
    new_indices = np.empty(len(vertices), dtype=np.int64)

    for i in tqdm(range(len(vertices)), desc="Merging vertices", disable=not show_progress):
        num_kept = len(kept_indices)
        dist2 = np.sum((kept[:num_kept] - vertices[i]) ** 2, axis=1)
        matches = np.flatnonzero((dist2 < tolerance) | (dist2 == 0.0))
        if len(matches):
            new_indices[i] = matches[0]
        else:
            kept[num_kept] = vertices[i]
            kept_indices.append(i)
            new_indices[i] = num_kept

    return np.array(kept_indices, dtype=np.int64), new_indices


def _merge_with_grid(vertices, tolerance, show_progress):
    kept_indices = []
    new_indices = np.empty(len(vertices), dtype=np.int64)

    if tolerance == 0.0:
        # Only exact duplicates merge, so the coordinates themselves are the key.
        first_seen = {}
        for i, point in enumerate(tqdm(vertices.tolist(), desc="Merging vertices", disable=not show_progress)):
            key = tuple(point)
            if key in first_seen:
                new_indices[i] = first_seen[key]
            else:
                first_seen[key] = len(kept_indices)
                new_indices[i] = len(kept_indices)
                kept_indices.append(i)
        return np.array(kept_indices, dtype=np.int64), new_indices

    cell_size = np.sqrt(tolerance)
    with np.errstate(over="ignore"):
        scaled = np.floor(vertices / cell_size)
    if len(scaled) and not (np.all(np.isfinite(scaled)) and np.abs(scaled).max() < _MAX_CELL_COORDINATE):
        # Cell coordinates would overflow int64, so the hash cannot separate vertices
        logger.debug(f"Cell coordinates out of range for tolerance {tolerance}, falling back to scan")
        return _merge_with_scan(vertices, tolerance, show_progress)

    kept = np.empty_like(vertices)
    cells = scaled.astype(np.int64)
    grid = {}

    for i in tqdm(range(len(vertices)), desc="Merging vertices", disable=not show_progress):
        candidates = []
        for cell in (cells[i] + _NEIGHBOR_CELL_OFFSETS).tolist():
            candidates.extend(grid.get(tuple(cell), ()))

        best = None
        if candidates:
            candidates = np.array(candidates, dtype=np.int64)
            dist2 = np.sum((kept[candidates] - vertices[i]) ** 2, axis=1)
            matches = candidates[(dist2 < tolerance) | (dist2 == 0.0)]
            if len(matches):
                best = matches.min()

        if best is not None:
            new_indices[i] = best
        else:
            new_index = len(kept_indices)
            kept[new_index] = vertices[i]
            grid.setdefault(tuple(cells[i].tolist()), []).append(new_index)
            kept_indices.append(i)
            new_indices[i] = new_index

    return np.array(kept_indices, dtype=np.int64), new_indices


def repair_duplicate_vertices(
    mesh: TriangleMesh,
    tolerance: float = 1e-12,
    method: str = "scan",
    show_progress: bool = False,
) -> int:
    """
    Merge near-coincident vertices of a mesh in place and remap its faces.

    Normal, UV and color arrays keep their own indexing and are left as they
    are. Returns the number of merged vertices.
    """
    mesh.check_indices()
    new_vertices, new_indices, num_merged = merge_duplicate_vertices(
        mesh.vertices, tolerance, method=method, show_progress=show_progress
    )

    mesh.vertices = new_vertices
    mesh.face_vertex_indices = new_indices[mesh.face_vertex_indices]

    logger.info(f"Merged {num_merged} duplicate vertices, {len(new_vertices)} remain")
    return num_merged
