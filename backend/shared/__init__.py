"""
Shared module for cross-cutting concerns of the CRUD API.

STRUCTURE:
- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging
  - constants.py: Cascade operations, route prefixes, audit fields

- shared.infrastructure: Database and request plumbing
  - db.py: SQLAlchemy engine and sessions
  - correlation.py: Request correlation IDs for logs

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging

IMPORT EXAMPLES:
    from shared.infrastructure.db import get_db, get_db_context
    from shared.config.settings import settings
    from shared.config.logging import get_logger
    from shared.utils.exceptions import NotFoundError, ValidationError
"""
