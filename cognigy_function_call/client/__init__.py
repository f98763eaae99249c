"""Cognigy HTTP client — discovery endpoints for flows and flow chart nodes."""

from cognigy_function_call.client.cognigy_client import CognigyClient, is_error
from cognigy_function_call.client.config import Settings

__all__ = ["CognigyClient", "Settings", "is_error"]
