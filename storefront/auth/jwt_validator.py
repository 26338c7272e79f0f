"""
JWT validator for the bearer tokens issued by the storefront auth service
"""
import jwt
import logging
from typing import Dict
from fastapi import HTTPException, status
from storefront.config import Settings


logger = logging.getLogger(__name__)


class JWTValidator:
    def __init__(self, settings: Settings):
        self.secret_key = settings.jwt_secret_key
        self.algorithm = settings.jwt_algorithm

    def verify_token(self, token: str) -> Dict:
        """
        Verify JWT token signature and expiry.
        Returns decoded token payload if valid.
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={
                    "verify_signature": True,
                    "verify_exp": True,
                    "require": ["sub"],
                }
            )
        except jwt.ExpiredSignatureError:
            logger.warning("JWT token has expired")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has expired"
            )
        except jwt.InvalidTokenError as e:
            logger.warning(f"JWT verification failed: {e}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authentication credentials"
            )

    def extract_roles(self, payload: Dict) -> list:
        """Roles from either a ``roles`` list claim or a single ``role`` claim"""
        roles = payload.get("roles")
        if roles is None:
            role = payload.get("role")
            roles = [role] if isinstance(role, str) and role else []
        elif isinstance(roles, str):
            roles = [r.strip() for r in roles.split(",") if r.strip()]
        elif not isinstance(roles, list):
            logger.warning(f"Ignoring malformed roles claim of type {type(roles).__name__}")
            roles = []
        return [r for r in roles if isinstance(r, str)]
