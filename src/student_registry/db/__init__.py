"""
student_registry.db

Persistence package (SQLAlchemy async) behind the embedded hosted backend.

Responsibilities:
- Provide ORM models, engine/session setup, and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Only `student_registry.hosted` touches this package. Against a real hosted
# project the service has no database of its own.
