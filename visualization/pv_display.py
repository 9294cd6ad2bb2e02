"""PyVista-based preview of decoded STL meshes."""

from typing import Optional

import numpy as np
import pyvista as pv

from stlcodec.adapters import to_pyvista
from stlcodec.mesh import Mesh


def show_mesh(
    mesh: Mesh,
    scalars: Optional[np.ndarray] = None,
    title: str = "stlcodec viewer",
    scalar_bar_title: Optional[str] = None,
) -> None:
    """Display a decoded mesh in an interactive PyVista window.

    Parameters
    ----------
    mesh : Mesh
        Mesh to display.
    scalars : array-like, optional
        Per-facet or per-point scalars used for color mapping.
    title : str
        Window title.
    scalar_bar_title : str, optional
        Label for the scalar bar.
    """
    pv_mesh = to_pyvista(mesh)

    plotter = pv.Plotter()
    if scalars is not None:
        # Cell or point data, depending on which count the scalars match
        if len(scalars) == pv_mesh.n_cells:
            pv_mesh.cell_data[scalar_bar_title or "scalars"] = scalars
        elif len(scalars) == pv_mesh.n_points:
            pv_mesh.point_data[scalar_bar_title or "scalars"] = scalars
        else:
            raise ValueError(
                f"Got {len(scalars)} scalars for a mesh with "
                f"{pv_mesh.n_points} points and {pv_mesh.n_cells} facets."
            )

        plotter.add_mesh(pv_mesh, show_edges=True)
    else:
        plotter.add_mesh(pv_mesh, color="white", show_edges=True)

    plotter.add_axes()
    plotter.show(title=title)
