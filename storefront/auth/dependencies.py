from fastapi import HTTPException, Request, status, Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from storefront.auth.jwt_validator import JWTValidator
import logging

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is reported as 401 rather than Starlette's default
bearer_scheme = HTTPBearer(auto_error=False)


def has_role(principal: Optional[dict], required_role: str) -> bool:
    """Pure authorization check: does the principal hold ``required_role``?"""
    if not principal:
        return False
    return required_role in principal.get("roles", [])


def get_jwt_validator(request: Request) -> JWTValidator:
    """Dependency to get the validator built by the application factory"""
    return request.app.state.jwt_validator


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    validator: JWTValidator = Depends(get_jwt_validator)
) -> dict:
    """Dependency to extract and validate the bearer token"""
    if not credentials:
        logger.warning("Authentication credentials missing")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header missing",
            headers={"WWW-Authenticate": "Bearer"}
        )

    payload = validator.verify_token(credentials.credentials)
    username = payload.get("sub")
    roles = validator.extract_roles(payload)

    logger.debug(f"Authenticated user: {username} (roles: {roles})")

    return {
        "username": username,
        "roles": roles,
        "payload": payload
    }


async def require_admin(
    request: Request,
    current_user: dict = Depends(get_current_user)
) -> dict:
    """Dependency to require the admin role before a mutating handler runs"""
    admin_role = request.app.state.settings.admin_role
    if not has_role(current_user, admin_role):
        logger.warning(f"User {current_user.get('username')} denied: requires {admin_role}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Requires {admin_role} role"
        )
    return current_user
