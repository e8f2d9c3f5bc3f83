"""
Tests for the generic CRUDService.

The repository, hooks and logger are mocks attached to a single parent
so the exact call sequence of every operation can be asserted.

Tests cover:
- validation -> business rules -> persistence -> post-hooks -> log ordering
- zero repository calls when validation or business rules fail
- scope and include options handed to every repository call
- not-found handling for update/remove, absence for find_one
- pagination defaults and metadata
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel

from dashboard_api.services.crud import CRUDConfig, CRUDService, PydanticValidator
from shared.config.constants import Roles
from shared.utils.context import DataScope, UserContext
from shared.utils.exceptions import BusinessRuleViolation, NotFoundError, ValidationError
from shared.utils.pagination import PageOptions, PaginationRequest, PaginationResult


class WidgetCreate(BaseModel):
    name: str
    size: int = 1


class WidgetUpdate(BaseModel):
    name: str | None = None
    size: int | None = None


USER = UserContext(
    sub="7",
    username="ana",
    role=Roles.DEPARTMENT_LEAD,
    organization_id=1,
    department_ids=frozenset({3}),
)
SCOPE = DataScope(organization_id=1, department_ids=frozenset({3}))
INCLUDE = ["parts"]


@pytest.fixture
def tracker():
    """Parent mock recording calls across repository, hooks and logger."""
    tracker = MagicMock()
    tracker.get_data_scope.return_value = SCOPE
    tracker.get_include_options.return_value = INCLUDE
    tracker.transform_create_dto.side_effect = lambda data, user: {**data, "created_by": user.username}
    tracker.transform_update_dto.side_effect = lambda data, user: dict(data)
    tracker.build_filters.side_effect = lambda query, user: dict(query.filters)
    tracker.validate_business_rules.return_value = None
    validator = PydanticValidator(WidgetCreate, WidgetUpdate)
    tracker.validator.validate.side_effect = validator.validate
    return tracker


@pytest.fixture
def service(tracker):
    config = CRUDConfig(
        entity_name="Widget",
        transform_create_dto=tracker.transform_create_dto,
        transform_update_dto=tracker.transform_update_dto,
        build_filters=tracker.build_filters,
        get_data_scope=tracker.get_data_scope,
        get_include_options=tracker.get_include_options,
        validate_business_rules=tracker.validate_business_rules,
        after_create=tracker.after_create,
        after_update=tracker.after_update,
        after_delete=tracker.after_delete,
    )
    return CRUDService(
        repository=tracker.repository,
        config=config,
        validator=tracker.validator,
        logger=tracker.logger,
    )


STEPS = {
    "validator.validate",
    "validate_business_rules",
    "repository.create",
    "repository.find_by_id",
    "repository.update",
    "repository.delete",
    "repository.find_many_with_pagination",
    "after_create",
    "after_update",
    "after_delete",
    "logger.info",
}


def steps(tracker) -> list[str]:
    """Names of the lifecycle calls, in order."""
    return [c[0] for c in tracker.mock_calls if c[0] in STEPS]


class TestCreate:
    def test_runs_steps_in_order(self, service, tracker):
        entity = SimpleNamespace(id=5, name="bolt")
        tracker.repository.create.return_value = entity

        result = service.create({"name": "bolt"}, USER)

        assert result is entity
        assert steps(tracker) == [
            "validator.validate",
            "validate_business_rules",
            "repository.create",
            "after_create",
            "logger.info",
        ]

    def test_passes_transformed_data_scope_and_include(self, service, tracker):
        tracker.repository.create.return_value = SimpleNamespace(id=5)

        service.create({"name": "bolt"}, USER)

        tracker.validate_business_rules.assert_called_once_with(
            {"name": "bolt", "size": 1}, USER, "create", None
        )
        tracker.repository.create.assert_called_once_with(
            {"name": "bolt", "size": 1, "created_by": "ana"}, INCLUDE, SCOPE
        )
        tracker.after_create.assert_called_once_with(tracker.repository.create.return_value, USER)

    def test_missing_required_field_makes_no_repository_calls(self, service, tracker):
        with pytest.raises(ValidationError) as exc_info:
            service.create({"size": 2}, USER)

        assert exc_info.value.fields == ["name"]
        assert tracker.repository.mock_calls == []
        tracker.validate_business_rules.assert_not_called()
        tracker.logger.info.assert_not_called()

    def test_business_rule_failure_aborts_before_persistence(self, service, tracker):
        tracker.validate_business_rules.side_effect = BusinessRuleViolation("duplicate")

        with pytest.raises(BusinessRuleViolation):
            service.create({"name": "bolt"}, USER)

        tracker.repository.create.assert_not_called()
        tracker.after_create.assert_not_called()
        tracker.logger.info.assert_not_called()

    def test_repository_failure_propagates_without_hooks(self, service, tracker):
        tracker.repository.create.side_effect = RuntimeError("store down")

        with pytest.raises(RuntimeError):
            service.create({"name": "bolt"}, USER)

        tracker.after_create.assert_not_called()
        tracker.logger.info.assert_not_called()


class TestFindAll:
    def test_defaults_sort_to_newest_first(self, service, tracker):
        tracker.repository.find_many_with_pagination.return_value = PaginationResult(
            data=[], total=0, page=1, limit=10
        )

        service.find_all_with_pagination(PaginationRequest(page=1, limit=10), USER)

        tracker.repository.find_many_with_pagination.assert_called_once_with(
            {}, {"created_at": "desc"}, INCLUDE, PageOptions(page=1, limit=10), SCOPE
        )

    def test_uses_requested_sort_and_filters(self, service, tracker):
        tracker.repository.find_many_with_pagination.return_value = PaginationResult(
            data=[], total=0, page=2, limit=5
        )
        query = PaginationRequest.from_params(
            {"page": "2", "limit": "5", "sort": "name", "order": "asc", "color": "red"}
        )

        service.find_all_with_pagination(query, USER)

        args = tracker.repository.find_many_with_pagination.call_args.args
        assert args[0] == {"color": "red"}
        assert args[1] == {"name": "asc"}
        assert args[3] == PageOptions(page=2, limit=5)

    def test_returns_data_and_metadata(self, service, tracker):
        rows = [SimpleNamespace(id=i) for i in range(10)]
        tracker.repository.find_many_with_pagination.return_value = PaginationResult(
            data=rows, total=25, page=1, limit=10
        )

        data, pagination = service.find_all_with_pagination(PaginationRequest(page=1, limit=10), USER)

        assert data == rows
        assert pagination.total_items == 25
        assert pagination.total_pages == 3
        assert pagination.has_next_page is True
        assert pagination.has_prev_page is False


class TestFindOne:
    def test_absent_entity_returns_none(self, service, tracker):
        tracker.repository.find_by_id.return_value = None

        assert service.find_one(99, USER) is None
        tracker.repository.find_by_id.assert_called_once_with(99, INCLUDE, SCOPE)

    def test_repeated_lookup_is_stable(self, service, tracker):
        entity = SimpleNamespace(id=5, name="bolt")
        tracker.repository.find_by_id.return_value = entity

        assert service.find_one(5, USER) is service.find_one(5, USER)


class TestUpdate:
    def test_runs_steps_in_order(self, service, tracker):
        tracker.repository.find_by_id.return_value = SimpleNamespace(id=5, name="bolt")
        tracker.repository.update.return_value = SimpleNamespace(id=5, name="nut")

        service.update(5, {"name": "nut"}, USER)

        assert steps(tracker) == [
            "validator.validate",
            "repository.find_by_id",
            "validate_business_rules",
            "repository.update",
            "after_update",
            "logger.info",
        ]

    def test_hooks_receive_previous_state(self, service, tracker):
        previous = SimpleNamespace(id=5, name="bolt")
        updated = SimpleNamespace(id=5, name="nut")
        tracker.repository.find_by_id.return_value = previous
        tracker.repository.update.return_value = updated

        result = service.update(5, {"name": "nut"}, USER)

        assert result is updated
        tracker.validate_business_rules.assert_called_once_with({"name": "nut"}, USER, "update", previous)
        tracker.repository.update.assert_called_once_with(5, {"name": "nut"}, INCLUDE, SCOPE)
        tracker.after_update.assert_called_once_with(updated, previous, USER)
        assert previous.name == "bolt"

    def test_only_sent_fields_are_written(self, service, tracker):
        tracker.repository.find_by_id.return_value = SimpleNamespace(id=5)
        tracker.repository.update.return_value = SimpleNamespace(id=5)

        service.update(5, {"size": 3}, USER)

        assert tracker.repository.update.call_args.args[1] == {"size": 3}

    def test_invalid_payload_makes_no_repository_calls(self, service, tracker):
        with pytest.raises(ValidationError) as exc_info:
            service.update(5, {"size": "big"}, USER)

        assert exc_info.value.fields == ["size"]
        assert tracker.repository.mock_calls == []

    def test_missing_entity_is_not_found_before_rules(self, service, tracker):
        tracker.repository.find_by_id.return_value = None

        with pytest.raises(NotFoundError):
            service.update(99, {"name": "nut"}, USER)

        tracker.validate_business_rules.assert_not_called()
        tracker.repository.update.assert_not_called()

    def test_row_vanishing_during_write_is_not_found(self, service, tracker):
        tracker.repository.find_by_id.return_value = SimpleNamespace(id=5)
        tracker.repository.update.return_value = None

        with pytest.raises(NotFoundError):
            service.update(5, {"name": "nut"}, USER)

        tracker.after_update.assert_not_called()


class TestRemove:
    def test_runs_steps_in_order(self, service, tracker):
        existing = SimpleNamespace(id=5)
        tracker.repository.find_by_id.return_value = existing
        tracker.repository.delete.return_value = True

        assert service.remove(5, USER) is None

        assert steps(tracker) == [
            "repository.find_by_id",
            "validate_business_rules",
            "repository.delete",
            "after_delete",
            "logger.info",
        ]
        tracker.validate_business_rules.assert_called_once_with(None, USER, "delete", existing)
        tracker.repository.delete.assert_called_once_with(5, SCOPE)
        tracker.after_delete.assert_called_once_with(existing, USER)

    def test_missing_entity_is_not_found(self, service, tracker):
        tracker.repository.find_by_id.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            service.remove(99, USER)

        assert exc_info.value.detail == "Widget with ID 99 not found"
        tracker.repository.delete.assert_not_called()
        tracker.after_delete.assert_not_called()

    def test_delete_miss_is_not_found(self, service, tracker):
        tracker.repository.find_by_id.return_value = SimpleNamespace(id=5)
        tracker.repository.delete.return_value = False

        with pytest.raises(NotFoundError):
            service.remove(5, USER)

        tracker.after_delete.assert_not_called()


class TestDefaultHooks:
    def test_optional_hooks_default_to_noops(self):
        """A config with only the required callables still runs every operation."""
        config = CRUDConfig(
            entity_name="Widget",
            transform_create_dto=lambda data, user: data,
            transform_update_dto=lambda data, user: data,
            build_filters=lambda query, user: {},
            get_data_scope=lambda user: DataScope.from_user(user),
            get_include_options=lambda user: None,
        )
        repository = MagicMock()
        repository.create.return_value = SimpleNamespace(id=1)
        repository.find_by_id.return_value = SimpleNamespace(id=1)
        repository.update.return_value = SimpleNamespace(id=1)
        repository.delete.return_value = True
        service = CRUDService(repository, config, PydanticValidator(WidgetCreate, WidgetUpdate), MagicMock())

        service.create({"name": "bolt"}, USER)
        service.update(1, {"name": "nut"}, USER)
        service.remove(1, USER)

        repository.delete.assert_called_once_with(1, SCOPE)
