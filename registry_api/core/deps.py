from __future__ import annotations

import logging
from typing import AsyncIterator, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from registry_api.core.logging import bind_caller
from registry_api.core.security import get_token_subject
from registry_api.core.settings import AppSettings
from registry_api.services.registry import Registry

logger = logging.getLogger(__name__)

# Bearer tokens are issued by an external authority; this service only verifies them.
bearer_scheme = HTTPBearer(auto_error=False)


# PUBLIC_INTERFACE
def get_settings_dep(request: Request) -> AppSettings:
    """Return the AppSettings the running application was built with."""
    return request.app.state.settings


# PUBLIC_INTERFACE
def get_registry(request: Request) -> Registry:
    """Return the registry owned by the running application."""
    registry: Optional[Registry] = getattr(request.app.state, "registry", None)
    if registry is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Registry is not ready",
        )
    return registry


# PUBLIC_INTERFACE
async def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: AppSettings = Depends(get_settings_dep),
) -> AsyncIterator[str]:
    """
    Resolve the caller identity from the Authorization bearer token.

    Log records emitted while the request is handled carry the identity;
    the binding is released once the handler returns.

    Raises:
        HTTPException: 401 if the token is missing, invalid, expired or has no subject.
    Yields:
        str: the token's 'sub' claim.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

    identity = get_token_subject(credentials.credentials, settings)
    if not identity:
        logger.info("Rejected bearer token on %s %s", request.method, request.url.path)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    request.state.caller = identity
    with bind_caller(identity):
        yield identity
