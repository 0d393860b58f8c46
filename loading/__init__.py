from .mesh_loading import load_triangle_mesh
from .wavefront import load_wavefront_mesh
