"""
Request body validation for the generic CRUD service.

The service calls the validator before anything else touches storage.
Pydantic errors are flattened into a single ValidationError carrying
the offending field names.
"""

from typing import Any, Literal, Mapping, Protocol

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from shared.utils.exceptions import ValidationError

Operation = Literal["create", "update"]


class Validator(Protocol):
    def validate(self, dto: Any, operation: Operation) -> dict[str, Any]:
        ...


class PydanticValidator:
    """
    Validates payloads against one schema per operation.

    create returns every field (defaults applied); update returns only the
    fields the caller actually sent, so omitted fields stay untouched.
    """

    def __init__(self, create_schema: type[BaseModel], update_schema: type[BaseModel]):
        self.create_schema = create_schema
        self.update_schema = update_schema

    def validate(self, dto: Any, operation: Operation) -> dict[str, Any]:
        schema = self.create_schema if operation == "create" else self.update_schema

        if isinstance(dto, BaseModel):
            dto = dto.model_dump(exclude_unset=True)
        if not isinstance(dto, Mapping):
            raise ValidationError("Request body must be a JSON object", fields=["body"])

        try:
            model = schema.model_validate(dict(dto))
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid {operation} payload",
                fields=_error_fields(e),
            ) from e

        if operation == "update":
            data = model.model_dump(exclude_unset=True)
            if not data:
                raise ValidationError("Update payload has no fields", fields=["body"])
            return data
        return model.model_dump()


def _error_fields(error: PydanticValidationError) -> list[str]:
    fields: list[str] = []
    for item in error.errors():
        name = ".".join(str(part) for part in item["loc"]) or "body"
        if name not in fields:
            fields.append(name)
    return fields
