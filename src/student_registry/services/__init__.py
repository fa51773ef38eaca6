"""
student_registry.services

Service layer package.

Responsibilities:
- Hold the operations shared by the web UI and the JSON API.
"""

# Package marker.
