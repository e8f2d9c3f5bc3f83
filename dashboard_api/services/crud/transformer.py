"""
Response Transformer.

Maps entities to their output schema and wraps them in the standard
envelope. One transformer per entity type; `path` is the resource path
reported in every envelope it builds.
"""

from typing import Any, Callable, Generic, Iterable, TypeVar

from pydantic import BaseModel

from shared.config.constants import Messages
from shared.utils.pagination import PaginationInfo
from shared.utils.schemas import StandardApiResponse

from .entity_builder import EntityOutputBuilder

OutputT = TypeVar("OutputT", bound=BaseModel)


class ResponseTransformer(Generic[OutputT]):
    """
    Entity -> output DTO -> StandardApiResponse.

    `builder` replaces the default field-matching conversion when an
    entity needs custom shaping. It must be pure.
    """

    def __init__(
        self,
        output_schema: type[OutputT],
        path: str,
        builder: Callable[[Any], OutputT] | None = None,
    ):
        self.output_schema = output_schema
        self.path = path
        self._builder = builder or EntityOutputBuilder(output_schema).build

        self.response_model = StandardApiResponse[output_schema]
        self.list_response_model = StandardApiResponse[list[output_schema]]

    def get_path(self) -> str:
        return self.path

    def transform(self, entity: Any) -> OutputT:
        return self._builder(entity)

    def to_response(self, entity: Any, message: str = Messages.OPERATION_COMPLETED) -> StandardApiResponse:
        return self.response_model(
            success=True,
            message=message,
            data=self.transform(entity),
            path=self.get_path(),
        )

    def to_paginated_response(
        self,
        entities: Iterable[Any],
        pagination: PaginationInfo,
        message: str = Messages.DATA_RETRIEVED,
    ) -> StandardApiResponse:
        return self.list_response_model(
            success=True,
            message=message,
            data=[self.transform(entity) for entity in entities],
            pagination=pagination,
            path=self.get_path(),
        )

    def to_deleted_response(self) -> StandardApiResponse[None]:
        return StandardApiResponse[None](
            success=True,
            message=Messages.ENTITY_DELETED,
            path=self.get_path(),
        )
