"""
Generic CRUD Service.

One concrete service handles every entity type. Entity-specific behavior
is supplied as data through CRUDConfig: a set of required transforms and
optional hooks. Repository, validator and logger are injected by whoever
composes the service (see dashboard_api/services/domain/).

Every operation runs the same fixed sequence:
    validation -> business rules -> persistence -> post-hooks -> log

Errors propagate untouched. Only successful operations are logged here;
failures are logged by the application's exception handlers.

Usage:
    service = CRUDService(
        repository=SQLAlchemyRepository(Visitor, db),
        config=visitor_config(db),
        validator=PydanticValidator(VisitorCreate, VisitorUpdate),
        logger=get_logger("dashboard_api.visitors"),
    )
    visitor = service.create({"first_name": "Ana", ...}, user)
    data, pagination = service.find_all_with_pagination(query, user)
"""

from dataclasses import dataclass
from typing import Any, Callable, Literal, Mapping, Sequence

from shared.config.constants import DEFAULT_SORT_FIELD, DEFAULT_SORT_ORDER
from shared.config.logging import StructuredLogger
from shared.utils.context import DataScope, UserContext
from shared.utils.exceptions import NotFoundError
from shared.utils.pagination import PageOptions, PaginationInfo, PaginationRequest

from .repository import EntityId, Repository
from .validation import Validator

Operation = Literal["create", "update", "delete"]

# Hook signatures
TransformDto = Callable[[dict[str, Any], UserContext], dict[str, Any]]
BuildFilters = Callable[[PaginationRequest, UserContext], dict[str, Any]]
GetDataScope = Callable[[UserContext], DataScope]
GetIncludeOptions = Callable[[UserContext], Sequence[str] | None]
BusinessRules = Callable[[Mapping[str, Any] | None, UserContext, Operation, Any], None]
AfterCreate = Callable[[Any, UserContext], None]
AfterUpdate = Callable[[Any, Any, UserContext], None]
AfterDelete = Callable[[Any, UserContext], None]


def _noop(*args: Any) -> None:
    return None


@dataclass(frozen=True)
class CRUDConfig:
    """Per-entity strategy consumed by CRUDService."""

    # Required
    entity_name: str
    transform_create_dto: TransformDto
    transform_update_dto: TransformDto
    build_filters: BuildFilters
    get_data_scope: GetDataScope
    get_include_options: GetIncludeOptions

    # Optional hooks
    validate_business_rules: BusinessRules = _noop
    after_create: AfterCreate = _noop
    after_update: AfterUpdate = _noop
    after_delete: AfterDelete = _noop


class CRUDService:
    """Scoped create/read/update/delete for one entity type."""

    def __init__(
        self,
        repository: Repository,
        config: CRUDConfig,
        validator: Validator,
        logger: StructuredLogger,
    ):
        self.repository = repository
        self.config = config
        self.validator = validator
        self.logger = logger

    @property
    def entity_name(self) -> str:
        return self.config.entity_name

    # =========================================================================
    # Operations
    # =========================================================================

    def create(self, dto: Any, user: UserContext) -> Any:
        data = self.validator.validate(dto, "create")
        self.config.validate_business_rules(data, user, "create", None)

        scope = self.config.get_data_scope(user)
        entity = self.repository.create(
            self.config.transform_create_dto(data, user),
            self.config.get_include_options(user),
            scope,
        )

        self.config.after_create(entity, user)
        self.logger.info(
            f"{self.entity_name} created",
            entity_id=_entity_id(entity),
            user_id=user.user_id,
            organization_id=scope.organization_id,
        )
        return entity

    def find_all_with_pagination(
        self, query: PaginationRequest, user: UserContext
    ) -> tuple[list[Any], PaginationInfo]:
        """
        Return one page of entities visible to the user plus page metadata.

        Pagination is derived only from the repository's total/page/limit.
        """
        filters = self.config.build_filters(query, user)
        sort = {query.sort or DEFAULT_SORT_FIELD: query.order or DEFAULT_SORT_ORDER}

        result = self.repository.find_many_with_pagination(
            filters,
            sort,
            self.config.get_include_options(user),
            PageOptions(page=query.page, limit=query.limit),
            self.config.get_data_scope(user),
        )
        return list(result.data), PaginationInfo.from_result(result)

    def find_one(self, entity_id: EntityId, user: UserContext) -> Any | None:
        """Scoped lookup. Absence is returned as None, never raised."""
        return self.repository.find_by_id(
            entity_id,
            self.config.get_include_options(user),
            self.config.get_data_scope(user),
        )

    def update(self, entity_id: EntityId, dto: Any, user: UserContext) -> Any:
        data = self.validator.validate(dto, "update")

        scope = self.config.get_data_scope(user)
        include = self.config.get_include_options(user)
        existing = self._get_existing(entity_id, include, scope)

        self.config.validate_business_rules(data, user, "update", existing)

        entity = self.repository.update(
            entity_id, self.config.transform_update_dto(data, user), include, scope
        )
        if entity is None:
            # Row vanished between the lookup and the write
            raise NotFoundError(self.entity_name, entity_id)

        self.config.after_update(entity, existing, user)
        self.logger.info(
            f"{self.entity_name} updated",
            entity_id=entity_id,
            user_id=user.user_id,
            fields=sorted(data),
        )
        return entity

    def remove(self, entity_id: EntityId, user: UserContext) -> None:
        scope = self.config.get_data_scope(user)
        existing = self._get_existing(entity_id, self.config.get_include_options(user), scope)

        self.config.validate_business_rules(None, user, "delete", existing)

        if not self.repository.delete(entity_id, scope):
            raise NotFoundError(self.entity_name, entity_id)

        self.config.after_delete(existing, user)
        self.logger.info(
            f"{self.entity_name} deleted",
            entity_id=entity_id,
            user_id=user.user_id,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _get_existing(self, entity_id: EntityId, include: Sequence[str] | None, scope: DataScope) -> Any:
        # Out-of-scope and missing ids are indistinguishable
        existing = self.repository.find_by_id(entity_id, include, scope)
        if existing is None:
            raise NotFoundError(self.entity_name, entity_id)
        return existing


def _entity_id(entity: Any) -> Any:
    if isinstance(entity, Mapping):
        return entity.get("id")
    return getattr(entity, "id", None)
