"""
Rigid-body mass properties of the solid bounded by a closed triangle mesh.

The volume integrals of 1, x, y, z, x^2, y^2, z^2, xy, yz and zx are turned
into surface integrals with the divergence theorem and evaluated exactly per
triangle (D. Eberly, "Polyhedral Mass Properties", Geometric Tools).
"""

import logging
from dataclasses import dataclass
import numpy as np
from numpy.typing import NDArray

from data_types import TriangleMesh

logger = logging.getLogger(__name__)

# Weights of the order 0, 1, 2 and 3 terms; the mixed xy, yz, zx terms use 1/120 too.
ONE_DIV_6 = 1.0 / 6.0
ONE_DIV_24 = 1.0 / 24.0
ONE_DIV_60 = 1.0 / 60.0
ONE_DIV_120 = 1.0 / 120.0

# Axis paired with each axis in the mixed products: x with y, y with z, z with x.
_NEXT_AXIS = [1, 2, 0]


@dataclass
class MassProperties:
    mass: float
    center: NDArray[np.float64]  # center of mass, length 3
    inertia: NDArray[np.float64]  # 3 x 3 symmetric inertia tensor

    @property
    def is_degenerate(self) -> bool:
        """True when the enclosed volume is zero, negative or not a number."""
        return not (np.isfinite(self.mass) and self.mass > 0.0)


def compute_volume_integrals(mesh: TriangleMesh) -> NDArray[np.float64]:
    """
    Return the ten volume integrals over the solid bounded by the mesh.

    Order: 1, x, y, z, x^2, y^2, z^2, xy, yz, zx. Unit density is assumed,
    so integral 0 is both volume and mass.
    """
    mesh.check_indices()
    corners = mesh.triangle_vertices().astype(np.float64)
    v0, v1, v2 = corners[:, 0], corners[:, 1], corners[:, 2]

    # Non-normalized normal, twice the triangle area in length.
    normals = np.cross(v1 - v0, v2 - v0)

    # Symmetric polynomials of the three corner coordinates, all axes at once.
    tmp0 = v0 + v1
    f1 = tmp0 + v2
    tmp1 = v0 * v0
    tmp2 = tmp1 + v1 * tmp0
    f2 = tmp2 + v2 * f1
    f3 = v0 * tmp1 + v1 * tmp2 + v2 * f2
    g0 = f2 + v0 * (f1 + v0)
    g1 = f2 + v1 * (f1 + v1)
    g2 = f2 + v2 * (f1 + v2)

    mixed = v0[:, _NEXT_AXIS] * g0 + v1[:, _NEXT_AXIS] * g1 + v2[:, _NEXT_AXIS] * g2

    integral = np.zeros(10, dtype=np.float64)
    integral[0] = np.sum(normals[:, 0] * f1[:, 0]) * ONE_DIV_6
    integral[1:4] = np.sum(normals * f2, axis=0) * ONE_DIV_24
    integral[4:7] = np.sum(normals * f3, axis=0) * ONE_DIV_60
    integral[7:10] = np.sum(normals * mixed, axis=0) * ONE_DIV_120
    return integral


def compute_mass_properties(mesh: TriangleMesh, body_coordinates: bool = True) -> MassProperties:
    """
    Compute mass, center of mass and inertia tensor of a closed mesh.

    The mesh must bound a solid with consistently outward-facing triangles;
    this is not checked. A mesh with zero, negative or NaN volume gives a
    degenerate result with the center and inertia set to zero.

    Parameters
    ----------
    mesh : TriangleMesh
        Closed, outward-oriented triangle mesh of unit density.
    body_coordinates : bool
        If True the inertia tensor is taken about the center of mass,
        otherwise about the origin.

    Returns
    -------
    MassProperties
    """
    integral = compute_volume_integrals(mesh)
    mass = float(integral[0])

    if not (np.isfinite(mass) and mass > 0.0):
        logger.warning(f"Degenerate mass {mass} computed from {mesh.num_triangles} triangles; "
                       "is the mesh closed and oriented outwards?")
        return MassProperties(mass=mass, center=np.zeros(3), inertia=np.zeros((3, 3)))

    center = integral[1:4] / mass

    x2, y2, z2, xy, yz, zx = integral[4:10]
    inertia = np.array([
        [y2 + z2, -xy, -zx],
        [-xy, x2 + z2, -yz],
        [-zx, -yz, x2 + y2],
    ])

    if body_coordinates:
        # Parallel axis theorem, shift the tensor from the origin to the center of mass.
        inertia -= mass * (np.dot(center, center) * np.eye(3) - np.outer(center, center))

    return MassProperties(mass=mass, center=center, inertia=inertia)
