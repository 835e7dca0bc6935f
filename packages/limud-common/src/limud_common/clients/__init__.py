"""
HTTP clients for Limud backend services.
"""

from limud_common.clients.recordings import (
    MissingAuthTokenError,
    RecordingsApiClient,
    RecordingsApiError,
)

__all__ = [
    "MissingAuthTokenError",
    "RecordingsApiClient",
    "RecordingsApiError",
]
