"""
student_registry.api.__main__

`python -m student_registry.api` (or the `student-registry` script): serve the
pages, the JSON API and, without a backend URL, the embedded backend.
"""

from __future__ import annotations

import uvicorn

from student_registry.api.app import create_app
from student_registry.observability.logging import get_logger
from student_registry.settings import get_settings

log = get_logger(__name__)


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)
    if settings.env == "prod" and settings.embedded_backend:
        log.warning("embedded_backend_in_prod")

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        # Secure session cookies need the original scheme from the proxy.
        proxy_headers=settings.session_https_only,
        log_config=None,  # logging is owned by structlog
    )


if __name__ == "__main__":
    main()
