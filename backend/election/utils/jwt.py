"""JWT Token Validation - resolves the caller identity for each request"""
import jwt
from typing import Any, Dict, Optional

from ..config.settings import settings
from ..domain.errors import AuthenticationError
from ..domain.models import ActorContext
from .logger import get_logger

logger = get_logger(__name__)


class JWTValidator:
    """Bearer token validator; the token subject is the election identity"""
    
    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        verify_signature: Optional[bool] = None
    ):
        self._secret = secret if secret is not None else settings.jwt_secret
        self._algorithm = algorithm or settings.jwt_algorithm
        if verify_signature is None:
            verify_signature = not settings.is_development
        self._verify_signature = verify_signature
    
    def validate_token(self, token: str) -> Dict[str, Any]:
        """
        Validate a bearer token
        
        In DEVELOPMENT mode the signature is not verified so locally minted
        tokens can be used; expiry is still enforced.
        
        Args:
            token: Bearer token (with or without 'Bearer ' prefix)
            
        Returns:
            Decoded token claims
            
        Raises:
            AuthenticationError: If token is invalid
        """
        if not token:
            raise AuthenticationError("Token is missing")
        
        if token.startswith("Bearer "):
            token = token[7:]
        
        try:
            if not self._verify_signature:
                return jwt.decode(
                    token,
                    options={
                        "verify_signature": False,
                        "verify_exp": True,
                    }
                )
            
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": True}
            )
            
        except jwt.ExpiredSignatureError:
            logger.warning("Token expired")
            raise AuthenticationError("Token has expired")
        except jwt.InvalidSignatureError:
            logger.warning("Invalid token signature")
            raise AuthenticationError("Invalid token signature")
        except jwt.PyJWTError as e:
            logger.error(f"JWT validation error: {e}")
            raise AuthenticationError(f"Invalid token: {str(e)}")
    
    def get_actor_context(self, token: str) -> ActorContext:
        """
        Extract actor context from validated token
        
        Args:
            token: Bearer token
            
        Returns:
            ActorContext with the caller identity
        """
        claims = self.validate_token(token)
        
        identity = claims.get("sub") or ""
        if not identity:
            logger.warning(f"No subject found in token claims. Available claims: {list(claims.keys())}")
            raise AuthenticationError("Unable to determine caller identity from token")
        
        roles = claims.get("roles", [])
        if not isinstance(roles, list):
            roles = [roles]
        
        return ActorContext(
            identity=identity,
            display_name=claims.get("name", identity),
            roles=roles
        )


# Global validator instance
_jwt_validator: Optional[JWTValidator] = None


def get_jwt_validator() -> JWTValidator:
    """Get global JWT validator instance"""
    global _jwt_validator
    if _jwt_validator is None:
        _jwt_validator = JWTValidator()
    return _jwt_validator


def get_current_user(authorization: str) -> ActorContext:
    """
    Get current user from authorization header
    
    Args:
        authorization: Authorization header value
        
    Returns:
        ActorContext
    """
    if not authorization:
        raise AuthenticationError("Authorization header is missing")
    
    validator = get_jwt_validator()
    return validator.get_actor_context(authorization)
