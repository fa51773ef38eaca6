"""
student_registry.web

Server-rendered web UI (Jinja2).

Responsibilities:
- Sign-in/sign-up pages and the student list/form/detail/delete pages.
- Form state handling and transient notifications (toasts).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Pages follow Post/Redirect/Get; every write redirects back to the list with a toast.
