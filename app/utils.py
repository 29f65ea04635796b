import uuid
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current UTC time truncated to whole milliseconds."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def new_post_id() -> str:
    return str(uuid.uuid4())
