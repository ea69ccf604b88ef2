"""Per-triangle properties and the rules for combining property tables.

A property table maps a property name to a list with one value per triangle.
Values are stored as given: no interpolation, deduplication or coercion is
performed when tables are combined.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Union

import numpy as np

from .errors import PropertySchemaError

logger = logging.getLogger(__name__)

PropertyTable = Dict[str, List[Any]]


@dataclass(frozen=True)
class PerTriangle:
    """
    Explicit per-triangle values, one entry per triangle in triangle order.

    Example:
        mesh.add_property("absorbed_light", PerTriangle([0.0, 0.0]))
    """

    values: Sequence[Any]

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class Broadcast:
    """
    A single value repeated for every triangle it is applied to.

    Example:
        mesh.add_property("color", Broadcast((0.1, 0.6, 0.2)))
    """

    value: Any


PropertyData = Union[PerTriangle, Broadcast]


def resolve(data: PropertyData, ntriangles: int) -> List[Any]:
    """Expand property data into a fresh list (`ntriangles` only applies to Broadcast)."""
    if isinstance(data, PerTriangle):
        values = data.values
        if isinstance(values, np.ndarray):
            # rows of the caller's array would otherwise be views into it
            values = values.copy()
        return list(values)
    if isinstance(data, Broadcast):
        if ntriangles < 0:
            raise ValueError(f"Cannot broadcast over {ntriangles} triangles")
        return [data.value] * ntriangles
    raise TypeError(
        f"Property data must be PerTriangle or Broadcast, got {type(data).__name__}"
    )


def copy_properties(table: PropertyTable) -> PropertyTable:
    return {k: list(v) for k, v in table.items()}


def check_schema(receiver: PropertyTable, donor: PropertyTable) -> None:
    if receiver.keys() != donor.keys():
        missing = sorted(set(receiver) - set(donor))
        extra = sorted(set(donor) - set(receiver))
        raise PropertySchemaError(
            "Properties of both meshes must be the same "
            f"(missing in donor: {missing}, unknown to receiver: {extra})"
        )


def merge_properties(receiver: PropertyTable, donor: PropertyTable) -> PropertyTable:
    """
    Append every property list of `donor` onto the matching list of `receiver`.

    Both tables must track exactly the same property names; the check happens
    before any list is touched so a failed merge leaves `receiver` unchanged.
    """
    if not receiver and not donor:
        return receiver
    check_schema(receiver, donor)
    for k in receiver:
        receiver[k].extend(donor[k])
    logger.debug("Merged properties %s", sorted(receiver))
    return receiver
