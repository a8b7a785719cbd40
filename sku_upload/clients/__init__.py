from .base import (
    CartContextProvider,
    RemoteCallError,
    StaticCartProvider,
    SubmissionClient,
    ValidationClient,
    row_errors_from_payload,
)
from .http import HttpCartProvider, HttpServiceClient, HttpSubmissionClient, HttpValidationClient

__all__ = [
    "CartContextProvider",
    "HttpCartProvider",
    "HttpServiceClient",
    "HttpSubmissionClient",
    "HttpValidationClient",
    "RemoteCallError",
    "StaticCartProvider",
    "SubmissionClient",
    "ValidationClient",
    "row_errors_from_payload",
]
