"""HTTP client for the marketplace API, usable without a Django project."""

from .http import ApiClient
from .saved import SavedHostelsState
from .session import SessionStore

__all__ = ["ApiClient", "SavedHostelsState", "SessionStore"]
