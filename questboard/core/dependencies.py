"""
Request-scoped dependencies shared by the API routers
"""
from typing import Optional

from questboard.core.config import settings


def get_default_user_id() -> Optional[int]:
    """
    Acting user for requests that carry no user id.

    There is no authentication layer; this configurable fallback stands in for
    the current user. Set DEFAULT_USER_ID=0 to require explicit user ids.
    """
    return settings.default_user_id
