"""Declared access requirements per route.

Learn: Instead of sprinkling ``if not user.is_admin`` through handlers,
each route declares the capabilities it needs:

    @router.post("/address", **guarded(Capability.ADMIN))

``guarded`` installs the matching gate dependencies and records the set
on the route (OpenAPI extension ``x-capabilities``), so the whole access
table can be listed (``labhub routes``) and checked by tests.

``resource_owner`` has no dependency of its own: ownership needs the
resource, so the handler enforces it with ``ensure_author`` after
loading. Declaring it still puts it in the table.
"""

from enum import Enum
from typing import Optional

from fastapi import Depends, FastAPI

from labhub.auth.dependencies import (
    get_current_user,
    require_admin,
    require_team_member,
)

CAPABILITIES_KEY = "x-capabilities"


class Capability(str, Enum):
    AUTHENTICATED = "authenticated"
    TEAM_MEMBER = "team_member"
    ADMIN = "admin"
    RESOURCE_OWNER = "resource_owner"


# Resolution order matters: the user must be resolved before any other check.
_GATES = (
    (Capability.AUTHENTICATED, get_current_user),
    (Capability.TEAM_MEMBER, require_team_member),
    (Capability.ADMIN, require_admin),
)


def guarded(*capabilities: Capability) -> dict:
    """Route decorator kwargs for a protected route."""
    required = set(capabilities)
    if not required:
        raise ValueError("guarded() needs at least one capability; use public()")
    required.add(Capability.AUTHENTICATED)

    dependencies = [Depends(gate) for cap, gate in _GATES if cap in required]
    return {
        "dependencies": dependencies,
        "openapi_extra": {CAPABILITIES_KEY: sorted(c.value for c in required)},
    }


def public() -> dict:
    """Route decorator kwargs for an open route."""
    return {"openapi_extra": {CAPABILITIES_KEY: []}}


_HTTP_METHODS = {"get", "put", "post", "delete", "options", "head", "patch", "trace"}


def route_capabilities(app: FastAPI) -> dict[tuple[str, str], Optional[frozenset[str]]]:
    """Map (METHOD, path) → declared capability set for every API operation.

    Read from the generated OpenAPI document, which lists every operation
    regardless of how routers were nested. Operations that declare
    nothing are reported with a None set so callers can flag them.
    """
    table = {}
    for path, item in app.openapi().get("paths", {}).items():
        for method, operation in item.items():
            if method not in _HTTP_METHODS:
                continue
            declared = operation.get(CAPABILITIES_KEY)
            table[(method.upper(), path)] = (
                frozenset(declared) if declared is not None else None
            )
    return table
