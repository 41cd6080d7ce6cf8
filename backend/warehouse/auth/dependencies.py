"""
Path permission enforcement for the request pipeline.

Attached as a router-level dependency on ``/api``. Each request is resolved
to a stored permission by method and path, then checked against the
caller's role. Denials short-circuit before the endpoint runs.
"""
from __future__ import annotations

import logging

from fastapi import Depends, Request

from ..dependencies import get_current_user, get_permission_interceptor
from ..errors import PermissionError, PermissionNotConfiguredError
from ..models.user import User
from .interceptor import AuthorizationOutcome, PermissionInterceptor, RequestContext

logger = logging.getLogger("warehouse.auth")


async def enforce_path_permission(
    request: Request,
    user: User = Depends(get_current_user),
    interceptor: PermissionInterceptor = Depends(get_permission_interceptor),
) -> None:
    context = RequestContext(
        path=request.url.path,
        http_method=request.method,
        role_id=user.role_id,
    )
    decision = await interceptor.authorize(context)

    if decision.allowed:
        logger.debug(
            "Access granted method=%s path=%s user_id=%s permission=%s",
            context.http_method,
            context.path,
            user.id,
            decision.permission.name if decision.permission else None,
        )
        return

    details = {
        "reason": decision.outcome.value,
        "request_method": context.http_method,
        "request_path": context.path,
    }
    if decision.permission is not None:
        details["required_permission"] = decision.permission.name

    logger.warning(
        "Access denied method=%s path=%s user_id=%s role_id=%s reason=%s",
        context.http_method,
        context.path,
        user.id,
        user.role_id,
        decision.outcome.value,
    )

    if decision.outcome is AuthorizationOutcome.NOT_CONFIGURED:
        raise PermissionNotConfiguredError(details=details)
    raise PermissionError(details=details)
