"""
Builder Services
Session/auth shell and mock deployment
"""

from .deploy import DeploymentError, DeploymentResult, DeploymentService, qr_code_url
from .session import AuthError, AuthState, SessionContext, User, decode_id_token

__all__ = [
    "DeploymentError",
    "DeploymentResult",
    "DeploymentService",
    "qr_code_url",
    "AuthError",
    "AuthState",
    "SessionContext",
    "User",
    "decode_id_token",
]
