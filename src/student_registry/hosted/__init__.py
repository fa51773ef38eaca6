"""
student_registry.hosted

Embedded stand-in for the hosted database/auth service.

Responsibilities:
- Serve the subset of the GoTrue (`/auth/v1`) and PostgREST (`/rest/v1`) APIs
  the service calls, backed by SQLAlchemy.
- Keep the repository runnable and testable without a hosted project.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Mounted only when STUDENT_REGISTRY_BACKEND_URL is unset (see `api.app.create_app`).
