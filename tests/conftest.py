import numpy as np
import pytest

from plantgeom import Mesh


@pytest.fixture
def two_triangles():
    """Vertices of two triangles: one in the xy plane, one in the xz plane."""
    return np.array([
        (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0),
        (0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (2.0, 0.0, 0.0),
    ])


@pytest.fixture
def two_triangle_mesh(two_triangles):
    return Mesh.from_vertices(two_triangles)
