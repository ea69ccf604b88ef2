"""
Configuration
=============
Central place for the constants shared by the mesh core.

Exports:
    NORMAL_KEY (str): Reserved property name holding one normal per triangle.
    SUPPORTED_DTYPES (tuple): Floating precisions a mesh can be built with.
    DEFAULT_DTYPE (numpy.dtype): Precision used when none is given. Set the
        PLANTGEOM_PRECISION environment variable to "float32" to change it.
    DEFAULT_RTOL (float): Relative tolerance of Mesh.isclose() when no
        absolute tolerance is given.
"""
from __future__ import annotations

import logging
import os
from typing import Any

import numpy as np

from .errors import PrecisionError

logger = logging.getLogger(__name__)

NORMAL_KEY = "normal"

SUPPORTED_DTYPES = (np.dtype(np.float32), np.dtype(np.float64))

DEFAULT_RTOL = float(np.sqrt(np.finfo(np.float64).eps))

PRECISION_ENV_VAR = "PLANTGEOM_PRECISION"


def resolve_dtype(dtype: Any) -> np.dtype:
    """Normalize a precision argument (type, dtype or name) to a supported numpy dtype."""
    try:
        dt = np.dtype(dtype)
    except TypeError as e:
        raise PrecisionError(f"Not a floating-point precision: {dtype!r}") from e
    if dt not in SUPPORTED_DTYPES:
        raise PrecisionError(
            f"Unsupported precision {dt.name} (expected one of "
            f"{', '.join(d.name for d in SUPPORTED_DTYPES)})"
        )
    return dt


def _default_dtype_from_env() -> np.dtype:
    name = os.environ.get(PRECISION_ENV_VAR)
    if not name:
        return np.dtype(np.float64)
    try:
        return resolve_dtype(name)
    except PrecisionError:
        logger.warning("Ignoring %s=%r, using float64", PRECISION_ENV_VAR, name)
        return np.dtype(np.float64)


DEFAULT_DTYPE = _default_dtype_from_env()
