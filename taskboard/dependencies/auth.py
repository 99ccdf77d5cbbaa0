"""Current-user resolution.

There is no authentication: every request acts as the seeded demo user.
"""

from ..crud import DEMO_USER_ID


async def get_current_user_id() -> int:
    return DEMO_USER_ID
