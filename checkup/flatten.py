"""
checkup/flatten.py — Collapse nested field definitions into dotted paths.

Input is the `/_mappings` body, keyed by entity:

    {"logs": {"mappings": {"event": {"properties": {
        "user": {"properties": {"name": {"type": "keyword"}}}}}}}}

Output keeps every type-level attribute and replaces `properties` with a
single-level map of dotted path -> FieldDescriptor:

    {"logs": {"event": {"properties": {
        "user": FieldDescriptor("event:user", {}),
        "user.name": FieldDescriptor("event:user.name", {"type": "keyword"})}}}}

The input is never mutated.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from checkup.errors import FlattenPathCollision

logger = logging.getLogger(__name__)

# Nested child-field containers, in visiting order: sub-fields, then multi-fields.
CHILD_CONTAINERS = ("properties", "fields")


class FieldDescriptor(dict):
    """Attributes of one mapped field, tagged with `type:dotted.path`."""

    def __init__(
        self, qualified_name: str, attributes: Mapping[str, Any], name: str | None = None
    ) -> None:
        super().__init__(attributes)
        self.qualified_name = qualified_name
        # Field name as declared; may itself contain dots.
        self.name = name if name is not None else qualified_name.rsplit(".", 1)[-1]

    @property
    def type_name(self) -> str:
        return self.qualified_name.split(":", 1)[0]

    @property
    def path(self) -> str:
        return self.qualified_name.split(":", 1)[1]

    def __repr__(self) -> str:
        return f"FieldDescriptor({self.qualified_name!r}, {dict.__repr__(self)})"


@dataclass
class FlattenedMapping:
    """Per entity, per type, flattened mapping plus any path collisions found."""

    entities: dict[str, dict[str, dict[str, Any]]] = field(default_factory=dict)
    collisions: dict[str, list[FlattenPathCollision]] = field(default_factory=dict)

    def types_for(self, entity: str) -> dict[str, dict[str, Any]] | None:
        return self.entities.get(entity)

    def collisions_for(self, entity: str) -> list[FlattenPathCollision]:
        return self.collisions.get(entity, [])


def flatten(mappings_by_entity: Mapping[str, Any]) -> FlattenedMapping:
    result = FlattenedMapping()
    if not isinstance(mappings_by_entity, Mapping):
        return result
    for entity in mappings_by_entity:
        type_defs = mappings_by_entity[entity]
        if isinstance(type_defs, Mapping) and "mappings" in type_defs:
            type_defs = type_defs["mappings"]
        if not isinstance(type_defs, Mapping):
            type_defs = {}

        flat_types: dict[str, dict[str, Any]] = {}
        collisions: list[FlattenPathCollision] = []
        for type_name, type_def in type_defs.items():
            if not isinstance(type_def, Mapping):
                continue
            flat_types[type_name] = flatten_type(entity, type_name, type_def, collisions)
        result.entities[entity] = flat_types
        if collisions:
            result.collisions[entity] = collisions
    return result


def flatten_type(
    entity: str,
    type_name: str,
    type_def: Mapping[str, Any],
    collisions: list[FlattenPathCollision],
) -> dict[str, Any]:
    flat_type = {
        key: copy.deepcopy(value) for key, value in type_def.items() if key != "properties"
    }
    fields: dict[str, FieldDescriptor] = {}
    _flatten_fields(
        entity, type_name, "", None, None, type_def.get("properties") or {}, fields, collisions
    )
    flat_type["properties"] = fields
    return flat_type


def _flatten_fields(
    entity: str,
    type_name: str,
    prefix: str,
    parent_path: str | None,
    parent_name: str | None,
    field_defs: Mapping[str, Any],
    out: dict[str, FieldDescriptor],
    collisions: list[FlattenPathCollision],
) -> None:
    for field_name, field_def in field_defs.items():
        if not isinstance(field_def, Mapping):
            continue
        path = prefix + field_name
        if parent_path is not None and field_name == parent_name:
            # Multi-field named after its parent is the parent's default field.
            path = parent_path
        attributes = {
            key: copy.deepcopy(value)
            for key, value in field_def.items()
            if key not in CHILD_CONTAINERS
        }
        _store(entity, type_name, path, field_name, attributes, out, collisions)

        for container in CHILD_CONTAINERS:
            children = field_def.get(container)
            if isinstance(children, Mapping):
                _flatten_fields(
                    entity,
                    type_name,
                    path + ".",
                    path if container == "fields" else None,
                    field_name,
                    children,
                    out,
                    collisions,
                )


def _store(
    entity: str,
    type_name: str,
    path: str,
    field_name: str,
    attributes: dict[str, Any],
    out: dict[str, FieldDescriptor],
    collisions: list[FlattenPathCollision],
) -> None:
    if path in out:
        collision = FlattenPathCollision(entity, type_name, path)
        logger.warning("%s", collision)
        collisions.append(collision)
        return
    out[path] = FieldDescriptor(f"{type_name}:{path}", attributes, field_name)
