"""Request-time authorization against the stored permission table.

The interceptor resolves ``(method, path)`` to a permission record and then
checks that the caller's role is linked to it. It is stateless: every
decision is a function of the request and of what the ports return at that
moment. It does not log or write anything; callers decide how to surface a
denial.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..domain.ports.permission import PermissionLookupPort, PermissionRecord, RoleGrantPort
from .path_matching import PathNormalizer, match_stored_patterns


class AuthorizationOutcome(str, Enum):
    GRANTED = "granted"
    NOT_CONFIGURED = "not_configured"
    NOT_GRANTED = "not_granted"


@dataclass(frozen=True)
class RequestContext:
    path: str
    http_method: str
    role_id: int | None


@dataclass(frozen=True)
class PermissionMatch:
    permission: PermissionRecord
    # Candidate pattern that hit, or None when found by the compiled fallback
    candidate: str | None


@dataclass(frozen=True)
class AuthorizationDecision:
    outcome: AuthorizationOutcome
    match: PermissionMatch | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome is AuthorizationOutcome.GRANTED

    @property
    def permission(self) -> PermissionRecord | None:
        return self.match.permission if self.match else None


class PermissionInterceptor:
    def __init__(
        self,
        permissions: PermissionLookupPort,
        grants: RoleGrantPort,
        normalizer: PathNormalizer | None = None,
    ):
        self.permissions = permissions
        self.grants = grants
        self.normalizer = normalizer or PathNormalizer()

    async def resolve(self, http_method: str, path: str) -> PermissionMatch | None:
        """Find the permission guarding ``http_method path``.

        Candidates from the normalizer are probed in order and the first
        hit wins. When none hits, stored patterns for the method are
        matched with every placeholder read as ``[0-9]+``.
        """
        method = http_method.upper()
        candidates = self.normalizer.candidates(path)
        if not candidates:
            return None

        for candidate in candidates:
            permission = await self.permissions.find_by_path_and_method(candidate, method)
            if permission is not None:
                return PermissionMatch(permission=permission, candidate=candidate)

        stored = await self.permissions.list_by_method(method)
        permission = match_stored_patterns(path, stored)
        if permission is None:
            return None
        return PermissionMatch(permission=permission, candidate=None)

    async def authorize(self, context: RequestContext) -> AuthorizationDecision:
        match = await self.resolve(context.http_method, context.path)
        if match is None:
            return AuthorizationDecision(AuthorizationOutcome.NOT_CONFIGURED)

        if context.role_id is None:
            return AuthorizationDecision(AuthorizationOutcome.NOT_GRANTED, match)

        granted = await self.grants.role_has_permission(context.role_id, match.permission.id)
        outcome = AuthorizationOutcome.GRANTED if granted else AuthorizationOutcome.NOT_GRANTED
        return AuthorizationDecision(outcome, match)
