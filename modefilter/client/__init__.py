"""Client layer module.

Contains the HTTP API client and the listing widget state machine.
"""

from modefilter.client.api_client import APIError, APIResponse, ModeFilterAPIClient
from modefilter.client.widget import PaginationControl, WidgetController, WidgetState

__all__ = [
    "APIError",
    "APIResponse",
    "ModeFilterAPIClient",
    "PaginationControl",
    "WidgetController",
    "WidgetState",
]
