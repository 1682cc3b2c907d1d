__all__ = [
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "authenticate_user",
    "get_current_user",
    "require_admin",
    "oauth2_scheme",
    "utcnow",
    "as_naive_utc",
]


def __getattr__(name):
    if name in {
        "verify_password",
        "get_password_hash",
        "create_access_token",
        "authenticate_user",
        "get_current_user",
        "require_admin",
        "oauth2_scheme",
    }:
        from . import security as _security
        return getattr(_security, name)
    if name in {"utcnow", "as_naive_utc"}:
        from . import clock as _clock
        return getattr(_clock, name)
    raise AttributeError(f"module 'skill_exchange.utils' has no attribute '{name}'")
