from vocabdash.auth.password import verify_password, get_password_hash
from vocabdash.auth.jwt import create_access_token, create_refresh_token, verify_token
from vocabdash.auth.dependencies import get_current_user, get_current_active_user

__all__ = [
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "create_refresh_token",
    "verify_token",
    "get_current_user",
    "get_current_active_user",
]
