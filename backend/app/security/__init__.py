# Security module
from app.security.auth import (
    get_password_hash, verify_password, create_access_token,
    get_current_user, get_identity_context, require_roles,
)
from app.security.context import IdentityContext

__all__ = [
    'get_password_hash', 'verify_password', 'create_access_token',
    'get_current_user', 'get_identity_context', 'require_roles', 'IdentityContext',
]
