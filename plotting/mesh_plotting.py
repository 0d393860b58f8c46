import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d.art3d import Line3DCollection

from data_types import TriangleMesh


def plot_mesh(mesh: TriangleMesh, title="3D Mesh", figsize=(12, 10), ax=None, alpha=0.7):
    # Create figure and 3D axis if not provided
    if ax is None:
        fig = plt.figure(figsize=figsize)
        ax = fig.add_subplot(111, projection='3d')
    else:
        fig = ax.figure

    ax.plot_trisurf(mesh.vertices[:, 0], mesh.vertices[:, 1], mesh.vertices[:, 2],
                    triangles=mesh.face_vertex_indices, cmap='viridis', edgecolor='black', alpha=alpha)
    ax.set_title(title)
    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    ax.set_zlabel("Z")
    return fig, ax


def plot_mesh_with_highlighted_edges(mesh: TriangleMesh, highlighted_edges, title="Mesh with Highlighted Edges",
                                     figsize=(10, 8), highlight_color='red', highlight_width=2,
                                     mesh_alpha=0.7, ax=None):
    """
    Plots a 3D mesh with specific edges highlighted in color.

    Parameters
    ----------
    mesh : TriangleMesh
        The mesh to draw.

    highlighted_edges : list of (int, int)
        Edges to highlight, as pairs of vertex indices (for example the
        boundary edges or the edges shared by more than two triangles).

    title : str, optional
        Title for the plot. Default is "Mesh with Highlighted Edges".

    figsize : tuple, optional
        Figure size as (width, height) in inches. Default is (10, 8).

    highlight_color : str or color, optional
        Color for the highlighted edges. Default is 'red'.

    highlight_width : float, optional
        Line width for highlighted edges. Default is 2.

    mesh_alpha : float, optional
        Transparency of the mesh surface. Default is 0.7.

    Returns
    -------
    fig : matplotlib.figure.Figure
        The figure containing the plot.

    ax : matplotlib.axes.Axes
        The 3D axes containing the plot.
    """
    fig, ax = plot_mesh(mesh, title=title, figsize=figsize, ax=ax, alpha=mesh_alpha)

    # Line3DCollection keeps large edge sets fast to draw
    highlighted_lines = [[mesh.vertices[v1_idx], mesh.vertices[v2_idx]] for v1_idx, v2_idx in highlighted_edges]
    if highlighted_lines:
        lc = Line3DCollection(highlighted_lines, colors=highlight_color,
                              linewidths=highlight_width, zorder=10)
        ax.add_collection(lc)

    # Attempt to set equal aspect ratio for a more realistic view
    ax.set_box_aspect([1, 1, 1])

    # Auto-adjust limits to include all vertices
    x_min, y_min, z_min = mesh.vertices.min(axis=0)
    x_max, y_max, z_max = mesh.vertices.max(axis=0)

    # Add a small buffer for better visualization
    buffer = max(x_max - x_min, y_max - y_min, z_max - z_min) * 0.05
    ax.set_xlim(x_min - buffer, x_max + buffer)
    ax.set_ylim(y_min - buffer, y_max + buffer)
    ax.set_zlim(z_min - buffer, z_max + buffer)

    ax.view_init(elev=30, azim=45)

    plt.tight_layout()
    return fig, ax
