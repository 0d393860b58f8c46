"""
Test script to verify the vertex offset solver.
"""

import os
import sys
import numpy as np
import pytest

# Add the parent directory to the Python path so we can import the offsetting module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from data_types import TriangleMesh
from offsetting import solve_linear_system, build_vertex_triangle_map, compute_vertex_offsets, make_offset
from mass_properties import compute_mass_properties
from test_topology import create_cube_mesh


def create_fan_mesh(num_sides=6):
    """A flat fan of triangles around vertex 0 in the z = 0 plane, normals along +z."""
    angles = np.linspace(0.0, 2.0 * np.pi, num_sides, endpoint=False)
    ring = np.column_stack([np.cos(angles), np.sin(angles), np.zeros(num_sides)])
    vertices = np.vstack([[0.0, 0.0, 0.0], ring])
    faces = np.array([[0, i + 1, (i + 1) % num_sides + 1] for i in range(num_sides)])
    return TriangleMesh(vertices=vertices, face_vertex_indices=faces)


def test_solve_linear_system_regular_matrix():
    a = np.array([[4.0, 1.0, 0.0], [1.0, 3.0, 1.0], [0.0, 1.0, 2.0]])
    b = np.array([1.0, 2.0, 3.0])
    np.testing.assert_allclose(solve_linear_system(a, b), np.linalg.solve(a, b))


def test_solve_linear_system_singular_matrix():
    a = np.ones((3, 3))
    b = np.ones(3)
    x = solve_linear_system(a, b)
    # Minimum-norm solution of x0 + x1 + x2 = 1
    np.testing.assert_allclose(x, np.full(3, 1.0 / 3.0))


def test_solve_linear_system_rejects_bad_shapes():
    with pytest.raises(ValueError):
        solve_linear_system(np.ones((2, 3)), np.ones(2))
    with pytest.raises(ValueError):
        solve_linear_system(np.eye(3), np.ones(2))


def test_build_vertex_triangle_map():
    faces = np.array([[0, 1, 2], [0, 2, 3]])
    assert build_vertex_triangle_map(faces, 5) == [[0, 1], [0], [0, 1], [1], []]


def test_flat_fan_moves_along_shared_normal():
    mesh = create_fan_mesh()
    original = mesh.vertices.copy()

    make_offset(mesh, 0.25)

    np.testing.assert_allclose(mesh.vertices[:, :2], original[:, :2], atol=1e-12)
    np.testing.assert_allclose(mesh.vertices[:, 2], np.full(len(original), 0.25), atol=1e-12)


def test_tetrahedron_corner_with_three_orthogonal_faces():
    vertices = np.array([
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [0.0, 0.0, 1.0],
    ])
    faces = np.array([
        [0, 2, 1],  # normal -z
        [0, 1, 3],  # normal -y
        [0, 3, 2],  # normal -x
        [1, 2, 3],  # slanted face
    ])
    mesh = TriangleMesh(vertices=vertices, face_vertex_indices=faces)

    offsets = compute_vertex_offsets(mesh)
    np.testing.assert_allclose(offsets[0], [-1.0, -1.0, -1.0], atol=1e-12)

    # Every incident face plane moves by exactly one unit
    normals = mesh.face_normals()
    for vertex_idx in range(4):
        for face_idx in np.flatnonzero(np.any(faces == vertex_idx, axis=1)):
            assert np.isclose(np.dot(offsets[vertex_idx], normals[face_idx]), 1.0)


@pytest.mark.parametrize("offset", [0.1, -0.2])
def test_cube_offset_changes_side_length(offset):
    mesh = create_cube_mesh()
    make_offset(mesh, offset)

    half = 0.5 + offset
    np.testing.assert_allclose(np.abs(mesh.vertices), np.full((8, 3), half), atol=1e-12)
    assert np.isclose(compute_mass_properties(mesh).mass, (2.0 * half) ** 3)


def test_unreferenced_vertex_is_not_moved():
    mesh = create_fan_mesh()
    mesh.vertices = np.vstack([mesh.vertices, [5.0, 5.0, 5.0]])

    make_offset(mesh, 1.0)
    np.testing.assert_array_equal(mesh.vertices[-1], [5.0, 5.0, 5.0])


def test_offset_of_mesh_without_triangles_is_a_no_op():
    mesh = TriangleMesh(vertices=np.ones((2, 3)), face_vertex_indices=np.zeros((0, 3), dtype=int))
    make_offset(mesh, 1.0)
    np.testing.assert_array_equal(mesh.vertices, np.ones((2, 3)))


def test_zero_area_triangle_does_not_crash():
    mesh = create_fan_mesh()
    # A sliver triangle with all corners on one line
    mesh.vertices = np.vstack([mesh.vertices, [2.0, 0.0, 0.0], [3.0, 0.0, 0.0]])
    mesh.face_vertex_indices = np.vstack([mesh.face_vertex_indices, [1, 7, 8]])

    make_offset(mesh, 0.5)
    assert np.all(np.isfinite(mesh.vertices))
