"""
Static role → permission table for the CRM.

Roles, permissions, actions and resources are closed enumerations; the
matrix and the lookup tables built from them are read-only mappings created
once at import time.
"""
import enum
from types import MappingProxyType
from typing import Mapping


class Role(str, enum.Enum):
    """Workspace authority levels. Not a strict ladder: manager and agent differ on read scope."""
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    MANAGER = "manager"
    AGENT = "agent"


class Action(str, enum.Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    ASSIGN = "assign"


class Resource(str, enum.Enum):
    PROSPECTS = "prospects"
    USERS = "users"
    WORKSPACES = "workspaces"
    SETTINGS = "settings"


class Permission(str, enum.Enum):
    """Atomic `<resource>:<verb>` capability tokens."""
    PROSPECTS_CREATE = "prospects:create"
    PROSPECTS_READ = "prospects:read"
    PROSPECTS_READ_ALL = "prospects:read_all"
    PROSPECTS_READ_ASSIGNED = "prospects:read_assigned"
    PROSPECTS_UPDATE = "prospects:update"
    PROSPECTS_UPDATE_OWN = "prospects:update_own"
    PROSPECTS_UPDATE_ASSIGNED = "prospects:update_assigned"
    PROSPECTS_DELETE = "prospects:delete"
    PROSPECTS_DELETE_OWN = "prospects:delete_own"
    PROSPECTS_ASSIGN = "prospects:assign"

    USERS_CREATE = "users:create"
    USERS_READ = "users:read"
    USERS_UPDATE = "users:update"
    USERS_DELETE = "users:delete"

    WORKSPACES_CREATE = "workspaces:create"
    WORKSPACES_READ = "workspaces:read"
    WORKSPACES_UPDATE = "workspaces:update"
    WORKSPACES_DELETE = "workspaces:delete"

    SETTINGS_READ = "settings:read"
    SETTINGS_UPDATE = "settings:update"


P = Permission

_ADMIN_PERMISSIONS = frozenset((
    P.PROSPECTS_CREATE,
    P.PROSPECTS_READ,
    P.PROSPECTS_READ_ALL,
    P.PROSPECTS_UPDATE,
    P.PROSPECTS_DELETE,
    P.PROSPECTS_ASSIGN,
    P.USERS_CREATE,
    P.USERS_READ,
    P.USERS_UPDATE,
    P.USERS_DELETE,
    P.WORKSPACES_READ,
    P.WORKSPACES_UPDATE,
    P.SETTINGS_READ,
    P.SETTINGS_UPDATE,
))

_MANAGER_PERMISSIONS = frozenset((
    P.PROSPECTS_CREATE,
    P.PROSPECTS_READ,
    P.PROSPECTS_READ_ALL,
    P.PROSPECTS_UPDATE_OWN,
    P.PROSPECTS_UPDATE_ASSIGNED,
    P.PROSPECTS_DELETE_OWN,
    P.PROSPECTS_ASSIGN,
    P.USERS_READ,
    P.WORKSPACES_READ,
    P.SETTINGS_READ,
))

_AGENT_PERMISSIONS = frozenset((
    P.PROSPECTS_CREATE,
    P.PROSPECTS_READ_ASSIGNED,
    P.PROSPECTS_UPDATE_OWN,
    P.PROSPECTS_UPDATE_ASSIGNED,
    P.PROSPECTS_DELETE_OWN,
    P.WORKSPACES_READ,
    P.SETTINGS_READ,
))

PERMISSION_MATRIX: Mapping[Role, frozenset[Permission]] = MappingProxyType({
    # super_admin holds every token, including the cross-workspace ones
    Role.SUPER_ADMIN: frozenset(Permission),
    Role.ADMIN: _ADMIN_PERMISSIONS,
    Role.MANAGER: _MANAGER_PERMISSIONS,
    Role.AGENT: _AGENT_PERMISSIONS,
})

# Flat (resource, action) lookups for everything except prospects, whose
# decisions depend on ownership. Pairs missing here are denied.
FLAT_ACTION_PERMISSIONS: Mapping[tuple[Resource, Action], Permission] = MappingProxyType({
    (Resource.USERS, Action.CREATE): P.USERS_CREATE,
    (Resource.USERS, Action.READ): P.USERS_READ,
    (Resource.USERS, Action.UPDATE): P.USERS_UPDATE,
    (Resource.USERS, Action.DELETE): P.USERS_DELETE,
    (Resource.WORKSPACES, Action.CREATE): P.WORKSPACES_CREATE,
    (Resource.WORKSPACES, Action.READ): P.WORKSPACES_READ,
    (Resource.WORKSPACES, Action.UPDATE): P.WORKSPACES_UPDATE,
    (Resource.WORKSPACES, Action.DELETE): P.WORKSPACES_DELETE,
    (Resource.SETTINGS, Action.READ): P.SETTINGS_READ,
    (Resource.SETTINGS, Action.UPDATE): P.SETTINGS_UPDATE,
})

# Route → any-of permissions
ROUTE_PERMISSIONS: Mapping[str, tuple[Permission, ...]] = MappingProxyType({
    "/crm": (P.PROSPECTS_READ, P.PROSPECTS_READ_ASSIGNED),
    "/dashboard": (P.PROSPECTS_READ, P.PROSPECTS_READ_ASSIGNED),
    "/users": (P.USERS_READ,),
    "/settings": (P.SETTINGS_READ,),
    "/workspaces": (P.WORKSPACES_CREATE,),  # super_admin only
})

# Routes any authenticated role may open
PUBLIC_ROUTES: frozenset[str] = frozenset(("/", "/login", "/unauthorized"))

del P
