"""Server-wide constants."""

from telloom.core.models.domain.enums import Role

PROJECT_NAME = "Telloom"
API_V1_STR = "/api/v1"

ACCESS_TOKEN_COOKIE = "sb-access-token"
ACTIVE_ROLE_COOKIE = "activeRole"

# Dashboard each role lands on after selection
ROLE_HOME_PATHS: dict[Role, str] = {
    Role.SHARER: "/role-sharer",
    Role.LISTENER: "/role-listener",
    Role.EXECUTOR: "/role-executor",
    Role.ADMIN: "/role-admin",
}

# Roles a user may grant themselves without an invitation
SELF_SERVICE_ROLES = frozenset({Role.SHARER, Role.LISTENER})
