"""
Request interceptors: authentication, role and ownership checks.

Each interceptor takes the RequestContext and returns either Ok(context)
to pass the request through (possibly with more information attached) or
Err(AppError) to short-circuit it. ``guard`` runs an ordered list of them
as a single FastAPI dependency. Handlers that take a JSON body read it with
``parse_body`` once the guard has passed:

    @router.patch("/{experience_id:int}/block")
    async def block(guarded=Depends(guard(require_auth, require_role(UserRole.ADMIN)))):
        if isinstance(guarded, Err):
            return error_response(guarded.error)
        ctx = guarded.value
        ...
"""

from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Optional, Type, TypeVar

import structlog
from fastapi import Depends, Request
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.errors import validation_details
from app.core import errors
from app.core.logging import get_logger
from app.core.outcome import Err, Ok, Outcome
from app.core.security import Identity, decode_access_token
from app.db.session import get_db
from app.models.user import UserRole

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class RequestContext:
    request: Request
    db: AsyncSession
    identity: Optional[Identity] = None

    @property
    def path_params(self) -> dict:
        return self.request.path_params


Interceptor = Callable[[RequestContext], Awaitable[Outcome[RequestContext]]]
OwnerResolver = Callable[[RequestContext], Awaitable[Outcome[int]]]
BodyModel = TypeVar("BodyModel", bound=BaseModel)


async def require_auth(ctx: RequestContext) -> Outcome[RequestContext]:
    """Decode the bearer token and attach the caller's identity."""
    header = ctx.request.headers.get("Authorization")
    if not header or not header.startswith(BEARER_PREFIX):
        return Err(errors.unauthorized())

    identity = decode_access_token(header[len(BEARER_PREFIX):].strip())
    if identity is None:
        return Err(errors.unauthorized("Invalid or expired token"))

    structlog.contextvars.bind_contextvars(user_id=identity.user_id, role=identity.role)
    return Ok(replace(ctx, identity=identity))


def require_role(*allowed: UserRole) -> Interceptor:
    allowed_roles = {UserRole(role).value for role in allowed}

    async def role_interceptor(ctx: RequestContext) -> Outcome[RequestContext]:
        if ctx.identity is None:
            return Err(errors.unauthorized())
        if ctx.identity.role not in allowed_roles:
            return Err(errors.forbidden())
        return Ok(ctx)

    return role_interceptor


def require_owner_or_admin(resolve_owner_id: OwnerResolver) -> Interceptor:
    """
    Admins pass unconditionally. Everyone else must own the resource;
    the resolver may itself fail (e.g. NOT_FOUND), which short-circuits.
    """

    async def owner_interceptor(ctx: RequestContext) -> Outcome[RequestContext]:
        if ctx.identity is None:
            return Err(errors.unauthorized())
        if ctx.identity.is_admin:
            return Ok(ctx)

        owner = await resolve_owner_id(ctx)
        if isinstance(owner, Err):
            return owner
        if owner.value != ctx.identity.user_id:
            return Err(errors.forbidden("You can only perform this action on your own resources"))
        return Ok(ctx)

    return owner_interceptor


async def run_interceptors(ctx: RequestContext, interceptors: tuple) -> Outcome[RequestContext]:
    outcome: Outcome[RequestContext] = Ok(ctx)
    for interceptor in interceptors:
        outcome = await interceptor(outcome.value)
        if isinstance(outcome, Err):
            logger.info(
                "request_intercepted",
                interceptor=getattr(interceptor, "__name__", repr(interceptor)),
                code=outcome.error.code,
            )
            break
    return outcome


def guard(*interceptors: Interceptor):
    """Build a dependency that runs ``interceptors`` in order."""

    async def guarded_context(
        request: Request,
        db: AsyncSession = Depends(get_db),
    ) -> Outcome[RequestContext]:
        return await run_interceptors(RequestContext(request=request, db=db), interceptors)

    return guarded_context


async def parse_body(ctx: RequestContext, schema: Type[BodyModel]) -> Outcome[BodyModel]:
    """
    Validate the JSON request body against ``schema``.

    Called by handlers once the guard has passed, so authentication and
    role failures are reported before anything about the body.
    """
    raw = await ctx.request.body()
    try:
        return Ok(schema.model_validate_json(raw))
    except ValidationError as e:
        details = validation_details(e.errors(), location="body")
        logger.info("request_validation_failed", errors=len(details))
        return Err(errors.validation_error("Invalid request body", details))
