from __future__ import annotations

import uuid


def new_uuid() -> str:
    """Generate a UUID4 string."""
    return str(uuid.uuid4())


def new_record_id() -> str:
    """Generate a client-side id for a new file or folder record."""
    return new_uuid()


def new_upload_id() -> str:
    """Generate a temporary id used to key upload progress."""
    return new_uuid()
