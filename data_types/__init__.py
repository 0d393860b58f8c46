from .triangle_mesh import TriangleMesh, NO_NEIGHBOR
