"""Generation of unique names used to namespace resources created by a run."""

import uuid


def unique_name() -> str:
    """Return a random 128-bit identifier rendered as text."""
    return str(uuid.uuid4())


def scoped_name(prefix: str) -> str:
    """Return a unique name under a human-readable prefix (e.g. ``origin_<uuid>``)."""
    return f"{prefix}_{unique_name()}"
