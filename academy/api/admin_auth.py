import hmac

from academy.core.config import get_settings


def is_admin_key(x_admin_key: str | None) -> bool:
    settings = get_settings()
    # An unset key disables key-based admin access entirely.
    if not settings.admin_api_key or not x_admin_key:
        return False
    return hmac.compare_digest(x_admin_key, settings.admin_api_key)
