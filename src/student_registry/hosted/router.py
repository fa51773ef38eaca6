"""
student_registry.hosted.router

Embedded backend router aggregator.

Responsibilities:
- Mount the auth and table APIs under the hosted service's paths.
- Apply the project API key check to every embedded endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from student_registry.hosted import auth, rest
from student_registry.hosted.deps import require_api_key

router = APIRouter(dependencies=[Depends(require_api_key)], include_in_schema=False)

router.include_router(auth.router, prefix="/auth/v1")
router.include_router(rest.router, prefix="/rest/v1")


# --- Module Notes -----------------------------------------------------------
# These endpoints simulate the hosted service while keeping the repo self-contained.
