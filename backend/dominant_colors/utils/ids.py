"""
Dominant Colors Request ID Utilities
Generate unique request IDs for tracing.
"""
import uuid
from datetime import datetime


def generate_request_id(prefix: str = "dc") -> str:
    """
    Generate a unique request ID for tracking.

    Returns:
        Request ID of the form <prefix>-<timestamp>-<uuid8>
    """
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    short_uuid = str(uuid.uuid4())[:8]
    return f"{prefix}-{timestamp}-{short_uuid}"
