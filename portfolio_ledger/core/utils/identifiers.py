"""
Identifier generation.
"""

import uuid


def generate_id() -> str:
    """Generate a new random record identifier."""
    return str(uuid.uuid4())
