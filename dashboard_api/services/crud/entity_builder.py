"""
Entity Output Builder.

Converts SQLAlchemy instances (or plain mappings) into Pydantic output
schemas by matching field names. Only attributes already loaded on the
instance are read: repositories hand out detached rows, and touching a
relationship that was not requested through `include` would fail.

Usage:
    from dashboard_api.services.crud.entity_builder import EntityOutputBuilder

    builder = EntityOutputBuilder(VisitorOutput)
    output = builder.build(visitor)
    outputs = builder.build_many(visitors)

    # With overrides
    output = builder.build(visitor, department_name="Front desk")
"""

from typing import Any, Generic, Mapping, TypeVar

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import InstanceState

T = TypeVar("T", bound=BaseModel)


class EntityOutputBuilder(Generic[T]):
    """
    Generic builder for converting model instances to Pydantic schemas.

    - Auto-maps fields with matching names (properties included)
    - Converts loaded relationships into nested dicts
    - Leaves unloaded attributes to the schema's defaults
    - Allows field overrides
    """

    def __init__(self, output_class: type[T]):
        self.output_class = output_class
        self._field_names = tuple(output_class.model_fields)

    def build(self, entity: Any, **overrides: Any) -> T:
        data: dict[str, Any] = {}
        unloaded = _unloaded_attributes(entity)

        for field_name in self._field_names:
            if field_name in overrides:
                data[field_name] = overrides[field_name]
            elif field_name in unloaded:
                continue
            elif isinstance(entity, Mapping):
                if field_name in entity:
                    data[field_name] = _plain(entity[field_name])
            elif hasattr(entity, field_name):
                data[field_name] = _plain(getattr(entity, field_name))

        return self.output_class.model_validate(data)

    def build_many(self, entities: list[Any], **shared_overrides: Any) -> list[T]:
        return [self.build(entity, **shared_overrides) for entity in entities]


def _instance_state(value: Any) -> InstanceState | None:
    state = sa_inspect(value, raiseerr=False)
    return state if isinstance(state, InstanceState) else None


def _unloaded_attributes(entity: Any) -> frozenset[str]:
    state = _instance_state(entity)
    if state is None:
        return frozenset()
    return frozenset(state.unloaded)


def _plain(value: Any) -> Any:
    """Turn a related ORM instance (or a list of them) into plain data."""
    if isinstance(value, (list, tuple, set)):
        return [_plain(item) for item in value]

    state = _instance_state(value)
    if state is None:
        return value

    unloaded = state.unloaded
    return {
        attr.key: getattr(value, attr.key)
        for attr in state.mapper.column_attrs
        if attr.key not in unloaded
    }
