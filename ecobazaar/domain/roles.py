# ecobazaar/domain/roles.py
from enum import Enum

from ecobazaar.domain.errors import AuthenticationRequiredError, RoleError
from ecobazaar.domain.schemas import Profile, Role, SessionContext


class Capability(str, Enum):
    SELL = "sell"
    ADMINISTER = "administer"


ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.USER: frozenset(),
    Role.SELLER: frozenset({Capability.SELL}),
    Role.ADMIN: frozenset({Capability.ADMINISTER}),
}

# every role needs an entry, a new Role without one fails at import
_missing = set(Role) - set(ROLE_CAPABILITIES)
if _missing:
    raise RuntimeError(f"Roles without capabilities: {sorted(r.value for r in _missing)}")


def require_user(session: SessionContext) -> str:
    if not session.authenticated:
        raise AuthenticationRequiredError()
    return session.user_id


def capabilities_for(role: Role | None) -> frozenset[Capability]:
    if role is None:
        return frozenset()
    return ROLE_CAPABILITIES[role]


def require_capability(profile: Profile | None, capability: Capability) -> Profile:
    if profile is None:
        raise RoleError("No profile for the acting user")
    if capability not in capabilities_for(profile.role):
        role = profile.role.value if profile.role else "unset"
        raise RoleError(f"Role '{role}' cannot {capability.value}")
    return profile
