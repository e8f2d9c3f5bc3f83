"""
Repository Pattern for scoped data access.

Repository is the contract the generic CRUD service consumes. Every
operation takes the caller's DataScope and must AND it into its query,
related objects reached through `include` included. The service never
re-checks isolation.

SQLAlchemyRepository is the shipped implementation over a Session.

Usage:
    from dashboard_api.services.crud.repository import SQLAlchemyRepository

    repo = SQLAlchemyRepository(Visitor, db)
    scope = DataScope(organization_id=1, department_ids=frozenset({3}))

    visitor = repo.find_by_id(42, ["department"], scope)
    page = repo.find_many_with_pagination(
        {"company": "Acme", "first_name": {"contains": "an"}},
        {"created_at": "desc"},
        ["department"],
        PageOptions(page=1, limit=10),
        scope,
    )
"""

from __future__ import annotations

from typing import Any, Generic, Mapping, Protocol, Sequence, TypeVar

from sqlalchemy import Select, and_, func, inspect, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload, with_loader_criteria
from sqlalchemy.sql.elements import ColumnElement

from dashboard_api.models import ScopedMixin
from shared.infrastructure.db import safe_commit
from shared.utils.context import DataScope
from shared.utils.exceptions import DatabaseError, ForbiddenError, ValidationError
from shared.utils.pagination import PageOptions, PaginationResult

EntityT = TypeVar("EntityT")
ModelT = TypeVar("ModelT", bound=ScopedMixin)

EntityId = int | str
Filters = Mapping[str, Any]
Sort = Mapping[str, str]
Include = Sequence[str] | None

OR_KEY = "or"


class Repository(Protocol[EntityT]):
    """Scoped CRUD + paginated query against a backing store."""

    def create(self, data: Mapping[str, Any], include: Include, scope: DataScope) -> EntityT:
        ...

    def find_by_id(self, entity_id: EntityId, include: Include, scope: DataScope) -> EntityT | None:
        ...

    def update(
        self, entity_id: EntityId, data: Mapping[str, Any], include: Include, scope: DataScope
    ) -> EntityT | None:
        ...

    def delete(self, entity_id: EntityId, scope: DataScope) -> bool:
        ...

    def find_many_with_pagination(
        self,
        filters: Filters,
        sort: Sort,
        include: Include,
        page_options: PageOptions,
        scope: DataScope,
    ) -> PaginationResult[EntityT]:
        ...


class SQLAlchemyRepository(Generic[ModelT]):
    """
    Repository over one SQLAlchemy model with organization/department isolation.

    The model declares its scope columns through ScopedMixin. Reads
    return detached instances, so an entity a caller holds is a stable
    snapshot that a later update in the same session cannot mutate.
    Models with `is_active` are soft deleted and inactive rows are invisible.
    """

    def __init__(self, model: type[ModelT], session: Session, *, entity_name: str | None = None):
        self._model = model
        self._session = session
        self._entity_name = entity_name or model.__name__
        self._columns = {c.key for c in inspect(model).column_attrs}
        self._relationships = inspect(model).relationships

    @property
    def model(self) -> type[ModelT]:
        return self._model

    @property
    def session(self) -> Session:
        return self._session

    @property
    def supports_soft_delete(self) -> bool:
        return "is_active" in self._columns

    # =========================================================================
    # Contract
    # =========================================================================

    def create(self, data: Mapping[str, Any], include: Include, scope: DataScope) -> ModelT:
        values = self._check_columns(dict(data))
        values = self._enforce_scope(values, scope, stamp=True)

        entity = self._model(**values)
        self._session.add(entity)
        self._commit("create")
        return self._reload(entity, include, scope)

    def find_by_id(self, entity_id: EntityId, include: Include, scope: DataScope) -> ModelT | None:
        query = self._scoped_query(scope).where(self._model.id == entity_id)
        query = self._apply_include(query, include, scope)
        entity = self._session.scalar(query)
        if entity is not None:
            self._session.expunge(entity)
        return entity

    def update(
        self, entity_id: EntityId, data: Mapping[str, Any], include: Include, scope: DataScope
    ) -> ModelT | None:
        values = self._check_columns(dict(data))
        values = self._enforce_scope(values, scope, stamp=False)

        entity = self._session.scalar(self._scoped_query(scope).where(self._model.id == entity_id))
        if entity is None:
            return None

        for field_name, value in values.items():
            setattr(entity, field_name, value)

        self._commit("update")
        return self._reload(entity, include, scope)

    def delete(self, entity_id: EntityId, scope: DataScope) -> bool:
        entity = self._session.scalar(self._scoped_query(scope).where(self._model.id == entity_id))
        if entity is None:
            return False

        if self.supports_soft_delete:
            entity.soft_delete()
        else:
            self._session.delete(entity)

        self._commit("delete")
        return True

    def find_many_with_pagination(
        self,
        filters: Filters,
        sort: Sort,
        include: Include,
        page_options: PageOptions,
        scope: DataScope,
    ) -> PaginationResult[ModelT]:
        query = self._scoped_query(scope)
        predicate = self._build_predicate(filters)
        if predicate is not None:
            query = query.where(predicate)

        total = self._session.scalar(
            select(func.count()).select_from(query.order_by(None).subquery())
        ) or 0

        query = self._apply_sort(query, sort)
        query = self._apply_include(query, include, scope)
        query = query.offset(page_options.offset).limit(page_options.limit)

        entities = list(self._session.scalars(query).all())
        for entity in entities:
            self._session.expunge(entity)

        return PaginationResult(
            data=entities,
            total=total,
            page=page_options.page,
            limit=page_options.limit,
        )

    # =========================================================================
    # Query Building
    # =========================================================================

    def _scoped_query(self, scope: DataScope) -> Select:
        """Base select with scope and soft delete applied."""
        query = select(self._model).where(self._model.scope_criteria(scope))
        if self.supports_soft_delete:
            query = query.where(self._model.is_active.is_(True))
        return query

    def _apply_include(self, query: Select, include: Include, scope: DataScope) -> Select:
        """Eager-load relationships, restricting each related model to the scope too."""
        for name in include or ():
            if name not in self._relationships:
                raise ValidationError(f"Unknown relation '{name}'", fields=["include"])
            target = self._relationships[name].mapper.class_
            query = query.options(selectinload(getattr(self._model, name)))
            if issubclass(target, ScopedMixin) and target is not self._model:
                query = query.options(
                    with_loader_criteria(target, target.scope_criteria(scope), include_aliases=True)
                )
        return query

    def _apply_sort(self, query: Select, sort: Sort) -> Select:
        for field_name, direction in sort.items():
            if field_name not in self._columns:
                raise ValidationError(f"Cannot sort by '{field_name}'", fields=["sort"])
            column = getattr(self._model, field_name)
            query = query.order_by(column.asc() if direction == "asc" else column.desc())
        # Stable ordering across pages when sort values tie
        return query.order_by(self._model.id.desc())

    def _build_predicate(self, filters: Filters) -> ColumnElement[bool] | None:
        predicates = []
        for field_name, value in filters.items():
            if value is None:
                continue
            if field_name == OR_KEY:
                branches = [p for p in (self._build_predicate(f) for f in value) if p is not None]
                if branches:
                    predicates.append(or_(*branches))
                continue
            if field_name not in self._columns:
                raise ValidationError(f"Cannot filter by '{field_name}'", fields=[field_name])
            predicates.append(self._column_predicate(getattr(self._model, field_name), value))

        if not predicates:
            return None
        return and_(*predicates)

    @staticmethod
    def _column_predicate(column: Any, value: Any) -> ColumnElement[bool]:
        if isinstance(value, (list, tuple, set, frozenset)):
            return column.in_(list(value))
        if not isinstance(value, Mapping):
            return column == value

        operators = {
            "eq": lambda v: column == v,
            "ne": lambda v: column != v,
            "in": lambda v: column.in_(list(v)),
            "contains": lambda v: column.icontains(v, autoescape=True),
            "gt": lambda v: column > v,
            "gte": lambda v: column >= v,
            "lt": lambda v: column < v,
            "lte": lambda v: column <= v,
        }
        clauses = []
        for op, operand in value.items():
            if op not in operators:
                raise ValidationError(f"Unsupported filter operator '{op}'", fields=[column.key])
            clauses.append(operators[op](operand))
        return and_(*clauses)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _check_columns(self, values: dict[str, Any]) -> dict[str, Any]:
        unknown = sorted(set(values) - self._columns)
        if unknown:
            raise ValidationError(f"Unknown fields for {self._entity_name}", fields=unknown)
        return values

    def _enforce_scope(self, values: dict[str, Any], scope: DataScope, *, stamp: bool) -> dict[str, Any]:
        """
        Refuse writes that would place a row outside the scope.

        On create the organization column is filled from the scope when the
        payload leaves it out (unless it is the primary key).
        """
        for field_name, allowed in self._model.scope_values(scope).items():
            value = values.get(field_name)
            if value is None:
                if not stamp:
                    continue
                if isinstance(allowed, frozenset) or field_name == "id":
                    raise ForbiddenError(
                        f"create {self._entity_name.lower()} outside your scope", field=field_name
                    )
                values[field_name] = allowed
                continue

            permitted = value in allowed if isinstance(allowed, frozenset) else value == allowed
            if not permitted:
                raise ForbiddenError(
                    f"write {self._entity_name.lower()} outside your scope", field=field_name
                )
        return values

    def _reload(self, written: ModelT, include: Include, scope: DataScope) -> ModelT:
        # Detach the write-side instance so the reload builds a fresh snapshot
        entity_id = written.id
        self._session.expunge(written)
        entity = self.find_by_id(entity_id, include, scope)
        if entity is None:
            raise DatabaseError(f"reload of {self._entity_name.lower()}")
        return entity

    def _commit(self, operation: str) -> None:
        try:
            safe_commit(self._session)
        except SQLAlchemyError as e:
            raise DatabaseError(f"{operation} {self._entity_name.lower()}") from e
