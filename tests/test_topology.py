"""
Test script to verify edge keys, triangle adjacency, winged edges and boundary loops.
"""

import os
import sys
import unittest
import numpy as np
import pytest

# Add the parent directory to the Python path so we can import the topology module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from data_types import TriangleMesh, NO_NEIGHBOR
from topology import (
    canonical_edge,
    triangle_edges,
    build_edge_map,
    find_pathological_edges,
    compute_neighbouring_triangle_map,
    compute_winged_edges,
    find_boundary_edges,
    count_boundary_loops,
)


def create_cube_mesh():
    """Unit cube centered at the origin, 12 outward-facing triangles."""
    vertices = np.array([
        [-0.5, -0.5, -0.5],  # 0
        [0.5, -0.5, -0.5],   # 1
        [0.5, 0.5, -0.5],    # 2
        [-0.5, 0.5, -0.5],   # 3
        [-0.5, -0.5, 0.5],   # 4
        [0.5, -0.5, 0.5],    # 5
        [0.5, 0.5, 0.5],     # 6
        [-0.5, 0.5, 0.5],    # 7
    ])
    faces = np.array([
        [0, 2, 1], [0, 3, 2],  # bottom
        [4, 5, 6], [4, 6, 7],  # top
        [0, 1, 5], [0, 5, 4],  # front
        [3, 7, 6], [3, 6, 2],  # back
        [0, 4, 7], [0, 7, 3],  # left
        [1, 2, 6], [1, 6, 5],  # right
    ])
    return TriangleMesh(vertices=vertices, face_vertex_indices=faces)


def create_square_mesh():
    """Unit square in the z = 0 plane split into two triangles."""
    vertices = np.array([
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [1.0, 1.0, 0.0],
        [0.0, 1.0, 0.0],
    ])
    faces = np.array([[0, 1, 2], [0, 2, 3]])
    return TriangleMesh(vertices=vertices, face_vertex_indices=faces)


def create_book_mesh():
    """Three triangles glued on the edge (0, 1), like the pages of a book."""
    vertices = np.array([
        [0.0, 0.0, 0.0],
        [0.0, 0.0, 1.0],
        [1.0, 0.0, 0.5],
        [0.0, 1.0, 0.5],
        [-1.0, 0.0, 0.5],
    ])
    faces = np.array([[0, 1, 2], [1, 0, 3], [0, 1, 4]])
    return TriangleMesh(vertices=vertices, face_vertex_indices=faces)


def test_canonical_edge():
    assert canonical_edge(5, 2) == (2, 5)
    assert canonical_edge(2, 5) == (2, 5)
    assert canonical_edge(3, 3) == (3, 3)

    edge = canonical_edge(np.int64(7), np.int64(1))
    assert edge == (1, 7)
    assert all(type(v) is int for v in edge)


def test_triangle_edges_follow_local_order():
    assert triangle_edges([4, 1, 9]) == [(1, 4), (1, 9), (4, 9)]


def test_build_edge_map_keeps_insertion_order():
    mesh = create_square_mesh()
    edge_map = build_edge_map(mesh.face_vertex_indices)

    assert edge_map[(0, 2)] == [0, 1]
    assert edge_map[(0, 1)] == [0]
    assert len(edge_map) == 5


def test_neighbouring_triangle_map_open_square():
    tri_map, pathological = compute_neighbouring_triangle_map(create_square_mesh())

    assert not pathological
    np.testing.assert_array_equal(tri_map, [
        [0, NO_NEIGHBOR, NO_NEIGHBOR, 1],
        [1, 0, NO_NEIGHBOR, NO_NEIGHBOR],
    ])


def test_neighbouring_triangle_map_accepts_face_array():
    mesh = create_square_mesh()
    tri_map_from_mesh, _ = compute_neighbouring_triangle_map(mesh)
    tri_map_from_faces, _ = compute_neighbouring_triangle_map(mesh.face_vertex_indices)
    np.testing.assert_array_equal(tri_map_from_mesh, tri_map_from_faces)


def test_neighbouring_triangle_map_is_symmetric():
    mesh = create_cube_mesh()
    tri_map, pathological = compute_neighbouring_triangle_map(mesh)

    assert not pathological
    assert tri_map.shape == (12, 4)
    assert np.all(tri_map[:, 1:] != NO_NEIGHBOR)

    faces = mesh.face_vertex_indices
    for t in range(len(faces)):
        for k in range(3):
            n = tri_map[t, k + 1]
            assert n != t
            # n must point back to t across the edge with the same vertices
            edge = canonical_edge(faces[t][k], faces[t][(k + 1) % 3])
            back = [j for j in range(3) if canonical_edge(faces[n][j], faces[n][(j + 1) % 3]) == edge]
            assert len(back) == 1
            assert tri_map[n, back[0] + 1] == t


def test_neighbouring_triangle_map_cube_neighbours():
    tri_map, _ = compute_neighbouring_triangle_map(create_cube_mesh())
    # Triangle 0 = (0, 2, 1): edge (0, 2) -> triangle 1, edge (2, 1) -> triangle 10, edge (1, 0) -> triangle 4
    np.testing.assert_array_equal(tri_map[0], [0, 1, 10, 4])


def test_neighbouring_triangle_map_flags_pathological_edges():
    tri_map, pathological = compute_neighbouring_triangle_map(create_book_mesh())

    assert pathological
    # The lowest-indexed other triangle is picked across the shared edge
    assert tri_map[0, 1] == 1
    assert tri_map[1, 1] == 0
    assert tri_map[2, 1] == 0


def test_out_of_range_indices_are_rejected():
    mesh = TriangleMesh(vertices=np.zeros((3, 3)), face_vertex_indices=np.array([[0, 1, 3]]))
    with pytest.raises(ValueError):
        compute_neighbouring_triangle_map(mesh)
    with pytest.raises(ValueError):
        compute_winged_edges(mesh)


def test_negative_indices_in_face_array_are_rejected():
    with pytest.raises(ValueError):
        compute_neighbouring_triangle_map(np.array([[0, -1, 2]]))


def test_find_pathological_edges():
    assert find_pathological_edges(create_book_mesh()) == [(0, 1)]
    assert find_pathological_edges(create_cube_mesh()) == []


class TestWingedEdges(unittest.TestCase):
    def setUp(self):
        self.cube = create_cube_mesh()
        self.square = create_square_mesh()

    def test_closed_manifold_has_three_halves_t_edges(self):
        winged_edges, pathological = compute_winged_edges(self.cube, allow_single_wing=False)

        self.assertFalse(pathological)
        self.assertEqual(len(winged_edges), 3 * self.cube.num_triangles // 2)
        for (a, b), (t0, t1) in winged_edges.items():
            self.assertLess(a, b)
            self.assertNotEqual(t1, NO_NEIGHBOR)
            self.assertLess(t0, t1)

    def test_single_wing_edges_are_optional(self):
        winged_edges, _ = compute_winged_edges(self.square, allow_single_wing=False)
        self.assertEqual(winged_edges, {(0, 2): (0, 1)})

        winged_edges, _ = compute_winged_edges(self.square, allow_single_wing=True)
        self.assertEqual(len(winged_edges), 5)
        self.assertEqual(winged_edges[(0, 2)], (0, 1))
        self.assertEqual(winged_edges[(0, 1)], (0, NO_NEIGHBOR))
        self.assertEqual(winged_edges[(2, 3)], (1, NO_NEIGHBOR))

    def test_pathological_edge_is_flagged_and_skipped(self):
        winged_edges, pathological = compute_winged_edges(create_book_mesh(), allow_single_wing=True)

        self.assertTrue(pathological)
        self.assertNotIn((0, 1), winged_edges)
        # The six outer edges of the three pages are boundary edges
        self.assertEqual(len(winged_edges), 6)

    def test_empty_mesh(self):
        mesh = TriangleMesh(vertices=np.zeros((0, 3)), face_vertex_indices=np.zeros((0, 3), dtype=int))
        winged_edges, pathological = compute_winged_edges(mesh)
        self.assertEqual(winged_edges, {})
        self.assertFalse(pathological)


def test_boundary_loops_closed_cube():
    num_loops, loops = count_boundary_loops(create_cube_mesh())
    assert num_loops == 0
    assert loops == []


def test_boundary_loops_open_box():
    cube = create_cube_mesh()
    # Remove the two top triangles
    open_box = TriangleMesh(vertices=cube.vertices, face_vertex_indices=np.delete(cube.face_vertex_indices, [2, 3], axis=0))

    num_loops, loops = count_boundary_loops(open_box)
    assert num_loops == 1
    assert loops[0] == [(4, 5), (4, 7), (5, 6), (6, 7)]


def test_boundary_loops_two_separate_squares():
    square = create_square_mesh()
    vertices = np.vstack([square.vertices, square.vertices + [0.0, 0.0, 2.0]])
    faces = np.vstack([square.face_vertex_indices, square.face_vertex_indices + 4])

    mesh = TriangleMesh(vertices=vertices, face_vertex_indices=faces)
    assert find_boundary_edges(mesh) == [(0, 1), (0, 3), (1, 2), (2, 3), (4, 5), (4, 7), (5, 6), (6, 7)]

    num_loops, loops = count_boundary_loops(mesh)
    assert num_loops == 2
    assert [len(loop) for loop in loops] == [4, 4]
