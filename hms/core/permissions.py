"""
Core permissions utilities for role-based access control.

Access is decided by an ordered list of path rules. The first rule whose
pattern matches the request path decides what the caller needs; nothing
here touches the request or the framework, so the policy can be checked
directly in unit tests.
"""
from enum import Enum
from typing import NamedTuple, Optional, Sequence, Tuple, Union
from ..auth.models import UserRole


class Access(str, Enum):
    """Requirements a rule can place on a path besides a specific role."""
    PERMIT_ALL = "permit_all"
    AUTHENTICATED = "authenticated"


class Decision(str, Enum):
    """Outcome of evaluating a request path against the policy."""
    PERMIT = "permit"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


Requirement = Union[Access, UserRole]


class AccessRule(NamedTuple):
    pattern: str
    requirement: Requirement

    def matches(self, path: str) -> bool:
        """
        Match a path against an exact pattern or a ``/prefix/**`` pattern.

        ``/admin/**`` matches ``/admin``, ``/admin/`` and anything below it,
        but not ``/administrator``. ``/**`` matches every path.
        """
        if self.pattern.endswith("/**"):
            prefix = self.pattern[:-3]
            return path == prefix or path.startswith(prefix + "/")
        return path == self.pattern


class AccessPolicy:
    """
    Ordered, immutable set of access rules.

    Args:
        rules: Rules in evaluation order; first match wins
        default: Requirement for paths no rule matches
    """
    def __init__(self, rules: Sequence[AccessRule], default: Requirement = Access.AUTHENTICATED):
        self.rules: Tuple[AccessRule, ...] = tuple(rules)
        self.default = default

    def requirement_for(self, path: str) -> Requirement:
        for rule in self.rules:
            if rule.matches(path):
                return rule.requirement
        return self.default

    def evaluate(self, path: str, role_claim: Optional[str]) -> Decision:
        """
        Decide whether a caller with the given session role may open a path.

        Args:
            path: Request path
            role_claim: Role stored in the caller's session, None when anonymous

        Returns:
            Decision: PERMIT, UNAUTHENTICATED or FORBIDDEN
        """
        requirement = self.requirement_for(path)

        if requirement == Access.PERMIT_ALL:
            return Decision.PERMIT
        if not role_claim:
            return Decision.UNAUTHENTICATED
        if requirement == Access.AUTHENTICATED:
            return Decision.PERMIT
        if role_claim == requirement.value:
            return Decision.PERMIT
        return Decision.FORBIDDEN


PUBLIC_PATHS = (
    "/",
    "/index",
    "/login",
    "/perform_login",
    "/logout",
    "/register",
    "/api/register",
    "/health",
    "/static/**",
    "/forms/**",
)

# URL prefix owned by each role; also the first segment of its landing path
ROLE_PREFIXES = {
    UserRole.ADMIN: "admin",
    UserRole.DOCTOR: "doctor",
    UserRole.PATIENT: "patient",
    UserRole.STAFF: "staff",
    UserRole.PHARMACY: "pharmacy",
}

DEFAULT_POLICY = AccessPolicy(
    [AccessRule(path, Access.PERMIT_ALL) for path in PUBLIC_PATHS]
    + [AccessRule(f"/{prefix}/**", role) for role, prefix in ROLE_PREFIXES.items()]
    + [AccessRule("/**", Access.AUTHENTICATED)]
)


def landing_path_for(role: Optional[str]) -> str:
    """
    Path a user is sent to right after logging in.

    Args:
        role: Stored role string

    Returns:
        str: ``/<prefix>/dashboard`` for known roles, ``/`` otherwise
    """
    try:
        user_role = UserRole(role)
    except ValueError:
        return "/"
    return f"/{ROLE_PREFIXES[user_role]}/dashboard"
