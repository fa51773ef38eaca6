"""
student_registry.api

HTTP surface of the student registry.

Responsibilities:
- FastAPI app factory, error handlers and the JSON router modules.
- Dependency wiring shared with the web pages and the embedded backend.
"""

# Package marker.
