"""Cloud control-plane client.

This package provides the database administration client and its
collaborators: credential resolution, error classification and the wire
models of the databases API.
"""

from .credentials import (
    CloudCredentials,
    CloudCredentialsError,
    CredentialProvider,
    FileCredentialProvider,
    StaticCredentialProvider,
)
from .databases import DatabaseAdminClient, format_instance, validate_password
from .errors import CloudAPIErrorResponse, ErrorClassifier, is_cloud_api_error_response
from .models import DatabaseInstanceRecord

__all__ = [
    "CloudAPIErrorResponse",
    "CloudCredentials",
    "CloudCredentialsError",
    "CredentialProvider",
    "DatabaseAdminClient",
    "DatabaseInstanceRecord",
    "ErrorClassifier",
    "FileCredentialProvider",
    "StaticCredentialProvider",
    "format_instance",
    "is_cloud_api_error_response",
    "validate_password",
]
