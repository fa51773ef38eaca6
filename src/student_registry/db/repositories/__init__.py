"""
student_registry.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories for the embedded backend.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories are intentionally thin; request parsing belongs in `hosted`.
