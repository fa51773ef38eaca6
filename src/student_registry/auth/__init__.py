"""
student_registry.auth

Authentication/authorization package.

Responsibilities:
- Session token helpers and validation.
- FastAPI auth dependencies (Principal for the JSON API and the web UI).
"""

# Package marker.
