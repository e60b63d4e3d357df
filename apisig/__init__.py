"""
API Gateway Request Signing - Standalone Implementation

This package computes the AWS Signature Version 4 style headers expected by
``execute-api`` endpoints without depending on boto3 or botocore.
"""

from .errors import SigningError, EncodingError, CryptoUnavailable
from .sigv4 import (
    DEFAULT_REGION,
    SERVICE,
    Signer,
    SignerConfig,
    SignedHeaders,
    SigningContext,
    SigningCredentials,
    derive_signing_key,
)

__version__ = "0.1.0"
__all__ = [
    "Signer",
    "SignerConfig",
    "SignedHeaders",
    "SigningContext",
    "SigningCredentials",
    "derive_signing_key",
    "DEFAULT_REGION",
    "SERVICE",
    "SigningError",
    "EncodingError",
    "CryptoUnavailable",
]
