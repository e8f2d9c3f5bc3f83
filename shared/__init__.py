"""
Shared module for code common to the dashboard API and its tests.

STRUCTURE:
- shared.security: Authentication
  - auth.py: JWT signing/verification, current_user_context

- shared.infrastructure: Database and request plumbing
  - db.py: SQLAlchemy sessions, safe_commit()
  - correlation.py: X-Request-ID middleware and log filter

- shared.config: Configuration
  - settings.py: Environment config (Pydantic)
  - logging.py: Structured logging
  - constants.py: Roles, sort defaults, envelope messages

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with log context
  - context.py: UserContext and DataScope
  - pagination.py: Page parsing and metadata
  - schemas.py: Response envelope
  - admin_schemas.py: Entity input/output schemas

IMPORT EXAMPLES:
    from shared.security.auth import verify_jwt, current_user_context
    from shared.infrastructure.db import get_db, safe_commit
    from shared.config.settings import settings
    from shared.config.constants import Roles
    from shared.utils.context import DataScope, UserContext
    from shared.utils.exceptions import NotFoundError, ForbiddenError
"""
