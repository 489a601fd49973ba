"""
Auth Module - Caller identity and forum capabilities.
"""

from forumapi.modules.auth.acl import AclOracle, AuthorizationOracle, Capability
from forumapi.modules.auth.session import Principal, anonymous, resolve_principal

__all__ = [
    "AclOracle",
    "AuthorizationOracle",
    "Capability",
    "Principal",
    "anonymous",
    "resolve_principal",
]
