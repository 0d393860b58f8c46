import argparse
import logging
import os
import sys
import numpy as np
import matplotlib.pyplot as plt

from loading import load_triangle_mesh
from deduplication import repair_duplicate_vertices, DEDUP_METHODS
from topology import (
    compute_neighbouring_triangle_map,
    compute_winged_edges,
    count_boundary_loops,
    find_boundary_edges,
    find_pathological_edges,
)
from mass_properties import compute_mass_properties
from offsetting import make_offset
from plotting import plot_mesh_with_highlighted_edges


DEFAULT_MERGE_TOLERANCE = 1e-12  # squared distance
DEFAULT_DEDUP_METHOD = "grid"

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='Repair a triangle mesh and report its connectivity and rigid-body mass properties.')
    parser.add_argument('load_filepath', type=str, help='Path to the mesh file to load (OBJ, STL, PLY, ...)')
    parser.add_argument('--tolerance', type=float, default=DEFAULT_MERGE_TOLERANCE,
                        help='Squared distance below which vertices are merged')
    parser.add_argument('--dedup-method', choices=DEDUP_METHODS, default=DEFAULT_DEDUP_METHOD,
                        help='Vertex merging strategy')
    parser.add_argument('--offset', type=float, default=0.0,
                        help='Signed distance to inflate (positive) or deflate (negative) the surface')
    parser.add_argument('--world-coordinates', action='store_true',
                        help='Report the inertia tensor about the origin instead of the center of mass')
    parser.add_argument('--output', '-o', type=str, default=None, help='Path to export the processed mesh to')
    parser.add_argument('--plot', action='store_true', help='Show the mesh with boundary and pathological edges')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose output')
    return parser.parse_args(argv)


def configure_logging(verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # Silence noisy third-party loggers
    logging.getLogger('trimesh').setLevel(logging.WARNING)
    logging.getLogger('matplotlib').setLevel(logging.WARNING)


def print_mass_properties(mass_properties, body_coordinates):
    frame = "center of mass" if body_coordinates else "origin"
    print(f"Mass (unit density): {mass_properties.mass:.6g}")
    print(f"Center of mass: {np.array2string(mass_properties.center, precision=6)}")
    print(f"Inertia tensor about the {frame}:")
    print(np.array2string(mass_properties.inertia, precision=6))


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.verbose)

    if not os.path.isfile(args.load_filepath):
        print(f"Error: The file {args.load_filepath} does not exist.")
        sys.exit(1)

    if args.tolerance < 0:
        print(f"Error: The merge tolerance must be non-negative. Got: {args.tolerance}")
        sys.exit(1)

    try:
        mesh = load_triangle_mesh(args.load_filepath)
    except ValueError as e:
        print(f"Error loading the mesh file: {e}")
        sys.exit(1)

    num_merged = repair_duplicate_vertices(mesh, args.tolerance, method=args.dedup_method,
                                           show_progress=args.verbose)

    _, pathological = compute_neighbouring_triangle_map(mesh)
    winged_edges, _ = compute_winged_edges(mesh, allow_single_wing=True)
    num_loops, _ = count_boundary_loops(mesh)

    print(f"Triangles: {mesh.num_triangles}")
    print(f"Vertices: {mesh.num_vertices} ({num_merged} merged)")
    print(f"Edges: {len(winged_edges)}")
    print(f"Pathological edges: {'yes' if pathological else 'no'}")
    print(f"Boundary loops: {num_loops}")

    if num_loops or pathological:
        logger.warning("Mesh is not a closed 2-manifold, mass properties are not meaningful")

    body_coordinates = not args.world_coordinates
    mass_properties = compute_mass_properties(mesh, body_coordinates=body_coordinates)
    print_mass_properties(mass_properties, body_coordinates)

    if args.offset != 0.0:
        make_offset(mesh, args.offset, show_progress=args.verbose)
        offset_properties = compute_mass_properties(mesh, body_coordinates=body_coordinates)
        print(f"Mass after offset of {args.offset}: {offset_properties.mass:.6g}")

    if args.output:
        mesh.to_trimesh().export(args.output)
        print(f"Saved processed mesh to {args.output}")

    if args.plot:
        highlighted = find_boundary_edges(mesh) + find_pathological_edges(mesh)
        plot_mesh_with_highlighted_edges(mesh, highlighted, title="Boundary and pathological edges")
        plt.show()


if __name__ == "__main__":
    main()
