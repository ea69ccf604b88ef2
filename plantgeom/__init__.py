"""
plantgeom: triangle-soup meshes for procedurally generated plant geometry.

Meshes store their vertices three per triangle, one normal per triangle and
any number of per-triangle properties, and can be merged or appended to one
another to assemble a scene.
"""
from .config import DEFAULT_DTYPE, NORMAL_KEY
from .errors import (
    EmptyMeshListError,
    MeshError,
    MeshShapeError,
    PrecisionError,
    PropertyLengthError,
    PropertySchemaError,
    TriangleIndexError,
)
from .logging_config import setup_logging
from .mesh import Mesh, area_triangle, merge_meshes, triangle_normal
from .primitives import ellipse, rectangle, solid_frustum, solid_frustum_from_transform, triangle
from .properties import Broadcast, PerTriangle, merge_properties
from .transforms import (
    apply_mat,
    mat_identity,
    mat_mul,
    mat_rotate_x,
    mat_rotate_y,
    mat_rotate_z,
    mat_scale,
    mat_translate,
)
from .vectors import vec3

__version__ = "0.1.0"
