"""
Signature Version 4 style signing for API Gateway ``execute-api`` endpoints.

The signature produced here is derived from the date, region and service only;
no canonical request (method, path, query, headers or body) is hashed and the
``SignedHeaders`` list is a fixed literal. Endpoints that verify the full SigV4
algorithm will reject these headers.

See: https://docs.aws.amazon.com/AmazonS3/latest/API/sigv4-auth-using-authorization-header.html
"""

import datetime
import hmac
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, MutableMapping, Optional

from .errors import CryptoUnavailable, EncodingError, SigningError

logger = logging.getLogger(__name__)

ALGORITHM = 'AWS4-HMAC-SHA256'
SERVICE = 'execute-api'
TERMINATOR = 'aws4_request'
DEFAULT_REGION = 'us-east-1'
SIGNED_HEADERS = 'content-type;host;x-amz-date;x-api-key'
CONTENT_TYPE = 'application/json'


def _to_bytes(value: str, name: str) -> bytes:
    try:
        return value.encode('utf-8')
    except UnicodeEncodeError as exc:
        raise EncodingError(name) from exc


def _hmac_sha256(key: bytes, msg: bytes) -> bytes:
    try:
        mac = hmac.new(key, msg, 'sha256')
    except ValueError as exc:
        raise CryptoUnavailable('HMAC-SHA256 is not supported by this interpreter') from exc
    return mac.digest()


def _to_utc(timestamp: datetime.datetime) -> datetime.datetime:
    # Naive values are taken to be UTC already.
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=datetime.timezone.utc)
    try:
        return timestamp.astimezone(datetime.timezone.utc)
    except OverflowError as exc:
        raise SigningError('timestamp is outside the representable UTC range') from exc


def format_request_datetime(timestamp: datetime.datetime) -> str:
    """Format ``timestamp`` as the ``X-Amz-Date`` value, e.g. ``20150830T123600Z``."""
    utc = _to_utc(timestamp)
    # strftime("%Y") does not zero-pad years below 1000 on every platform.
    return f"{format_date_stamp(utc)}T{utc.hour:02d}{utc.minute:02d}{utc.second:02d}Z"


def format_date_stamp(timestamp: datetime.datetime) -> str:
    utc = _to_utc(timestamp)
    return f"{utc.year:04d}{utc.month:02d}{utc.day:02d}"


def build_credential_scope(date_stamp: str) -> str:
    # The region is part of the signing key but not of the scope string.
    return f"{date_stamp}/{SERVICE}/{TERMINATOR}"


def derive_signing_key(secret_key: str, date_stamp: str, region: str, service: str = SERVICE) -> bytes:
    """
    Derive the signing key through the chained HMAC-SHA256 cascade.

    kDate = HMAC("AWS4" + secret_key, date_stamp)
    kRegion = HMAC(kDate, region)
    kService = HMAC(kRegion, service)
    kSigning = HMAC(kService, "aws4_request")

    :raises EncodingError: if an input cannot be encoded as UTF-8.
    :raises CryptoUnavailable: if HMAC-SHA256 cannot be instantiated.
    """
    k_date = _hmac_sha256(_to_bytes('AWS4' + secret_key, 'secret_key'), _to_bytes(date_stamp, 'date_stamp'))
    k_region = _hmac_sha256(k_date, _to_bytes(region, 'region'))
    k_service = _hmac_sha256(k_region, _to_bytes(service, 'service'))
    return _hmac_sha256(k_service, TERMINATOR.encode('utf-8'))


def build_authorization(access_key: str, credential_scope: str, signature: str) -> str:
    return (
        f"{ALGORITHM} Credential={access_key}/{credential_scope}, "
        f"SignedHeaders={SIGNED_HEADERS}, Signature={signature}"
    )


@dataclass(frozen=True)
class SigningCredentials:
    access_key: str
    secret_key: str = field(repr=False)
    api_key: str = field(repr=False)


@dataclass(frozen=True)
class SignerConfig:
    credentials: Optional[SigningCredentials] = None
    region: str = DEFAULT_REGION


@dataclass(frozen=True)
class SigningContext:
    """Date values for one signing call, all taken from a single instant."""

    timestamp: datetime.datetime
    request_datetime: str
    date_stamp: str
    credential_scope: str

    @classmethod
    def from_timestamp(cls, timestamp: datetime.datetime) -> 'SigningContext':
        utc = _to_utc(timestamp)
        date_stamp = format_date_stamp(utc)
        return cls(
            timestamp=utc,
            request_datetime=format_request_datetime(utc),
            date_stamp=date_stamp,
            credential_scope=build_credential_scope(date_stamp),
        )


@dataclass(frozen=True)
class SignedHeaders:
    authorization: str
    amz_date: str
    api_key: str = field(repr=False)
    content_type: str = CONTENT_TYPE

    @property
    def signature(self) -> str:
        _, _, signature = self.authorization.partition('Signature=')
        return signature

    def as_dict(self) -> Dict[str, str]:
        return {
            'X-Amz-Date': self.amz_date,
            'Authorization': self.authorization,
            'x-api-key': self.api_key,
            'Content-Type': self.content_type,
        }


class Signer:
    """
    Produces the authentication headers for requests to an ``execute-api`` endpoint.

    The signer holds a single immutable :class:`SignerConfig`. ``set_region`` and
    ``set_credentials`` replace that value as a whole and each call to ``sign``
    reads it once, so a signature never mixes settings from before and after a
    reconfiguration. Ordering setters against concurrent ``sign`` calls is left
    to the caller.
    """

    def __init__(self, credentials: Optional[SigningCredentials] = None, region: str = DEFAULT_REGION) -> None:
        self._config = SignerConfig(credentials, region)

    @classmethod
    def from_keys(cls, access_key: str, secret_key: str, api_key: str, region: str = DEFAULT_REGION) -> 'Signer':
        return cls(SigningCredentials(access_key, secret_key, api_key), region)

    @classmethod
    def from_config(cls, config: SignerConfig) -> 'Signer':
        return cls(config.credentials, config.region)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._config!r})"

    @property
    def config(self) -> SignerConfig:
        return self._config

    @property
    def region(self) -> str:
        return self._config.region

    @property
    def credentials(self) -> Optional[SigningCredentials]:
        return self._config.credentials

    def set_region(self, region: str) -> None:
        """Set the region used by subsequent calls. Defaults to ``us-east-1``."""
        self._config = replace(self._config, region=region)

    def set_credentials(self, secret_key: str, access_key: str, api_key: str) -> None:
        self._config = replace(self._config, credentials=SigningCredentials(access_key, secret_key, api_key))

    def with_region(self, region: str) -> 'Signer':
        return type(self).from_config(replace(self._config, region=region))

    def sign(self, timestamp: datetime.datetime) -> SignedHeaders:
        """
        Compute the signed header values for ``timestamp``.

        Aware timestamps are converted to UTC; naive ones are treated as UTC.

        :raises SigningError: if no credentials have been set, or the timestamp
            cannot be converted to UTC.
        :raises EncodingError: if the secret key or region is not encodable.
        :raises CryptoUnavailable: if HMAC-SHA256 cannot be instantiated.
        """
        config = self._config
        credentials = config.credentials
        if credentials is None:
            raise SigningError('credentials have not been set')

        context = SigningContext.from_timestamp(timestamp)
        signing_key = derive_signing_key(credentials.secret_key, context.date_stamp, config.region)
        authorization = build_authorization(credentials.access_key, context.credential_scope, signing_key.hex())

        logger.debug(
            "Signed %s request for access key %s, scope %s, region %s",
            SERVICE, credentials.access_key, context.credential_scope, config.region,
        )
        return SignedHeaders(
            authorization=authorization,
            amz_date=context.request_datetime,
            api_key=credentials.api_key,
        )

    def sign_now(self) -> SignedHeaders:
        return self.sign(datetime.datetime.now(datetime.timezone.utc))

    def apply(
            self,
            headers: MutableMapping[str, str],
            timestamp: Optional[datetime.datetime] = None
    ) -> MutableMapping[str, str]:
        """
        Write the signed headers into ``headers`` and return it.

        Existing entries with the same names are replaced regardless of case.
        """
        signed = self.sign_now() if timestamp is None else self.sign(timestamp)
        values = signed.as_dict()
        names = {name.lower() for name in values}
        for key in [key for key in headers if key.lower() in names]:
            del headers[key]
        headers.update(values)
        return headers
