"""
student_registry.backend_clients

Hosted backend client package.

Responsibilities:
- Provide the client interface for calling the hosted database/auth service.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services depend on this boundary (not on HTTP or routers directly).
