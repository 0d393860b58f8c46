from .linalg import solve_linear_system
from .offset import build_vertex_triangle_map, compute_vertex_offsets, make_offset
