"""Authentication and authorization core module."""

from app.core.auth.identity import (
    Caller,
    InvalidIdentity,
    SuperAdmin,
    TenantMember,
    caller_for_user,
    caller_from_claims,
    claims_for,
    tenant_scope,
)
from app.core.auth.jwt import access_token_ttl, create_access_token, decode_token
from app.core.auth.password import burn_password_check, hash_password, verify_password

__all__ = [
    "Caller",
    "InvalidIdentity",
    "SuperAdmin",
    "TenantMember",
    "caller_for_user",
    "caller_from_claims",
    "claims_for",
    "tenant_scope",
    "access_token_ttl",
    "create_access_token",
    "decode_token",
    "burn_password_check",
    "hash_password",
    "verify_password",
]
