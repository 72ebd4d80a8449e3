"""Row ownership filter shared by every task query"""

from typing import Dict, Optional

OWNER_COLUMN = "user_id"


def owner_filter(user_id: str, task_id: Optional[str] = None) -> Dict[str, str]:
    """
    Build the equality filters that scope a query to the caller's own rows.

    With task_id the filter matches a single task only if the caller owns
    it; a foreign task and a missing task are therefore indistinguishable.
    """
    if not user_id:
        raise ValueError("owner_filter requires a user id")

    filters = {OWNER_COLUMN: user_id}
    if task_id is not None:
        filters["id"] = task_id
    return filters
