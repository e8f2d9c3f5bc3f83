"""
CRUD Services - Generic operations for entity management.

Provides:
- Repository / SQLAlchemyRepository: Scoped data access
- CRUDService / CRUDConfig: Generic create/read/update/delete flow with hooks
- PydanticValidator: Request body validation
- ResponseTransformer / EntityOutputBuilder: Entity to envelope conversion
"""

from .repository import Repository, SQLAlchemyRepository
from .service import CRUDConfig, CRUDService
from .validation import PydanticValidator, Validator
from .entity_builder import EntityOutputBuilder
from .transformer import ResponseTransformer

__all__ = [
    # Repository
    "Repository",
    "SQLAlchemyRepository",
    # Service
    "CRUDConfig",
    "CRUDService",
    # Validation
    "PydanticValidator",
    "Validator",
    # Output
    "EntityOutputBuilder",
    "ResponseTransformer",
]
