"""
VolcEngine HMAC-SHA256 request signer
"""

import hashlib
import hmac
import logging
from datetime import datetime, UTC
from typing import Dict, Optional
from urllib.parse import urlsplit

from .models import Credentials, SignatureOptions


ALGORITHM = "HMAC-SHA256"
SCOPE_TERMINATOR = "request"
SECRET_KEY_PREFIX = "volc"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# The Authorization header always advertises these, whatever was canonicalized.
SIGNED_HEADERS = "content-type;host;x-date"

logger = logging.getLogger(__name__)


def format_timestamp(timestamp: datetime) -> str:
    """Render an aware datetime as the basic ISO-8601 form used in X-Date."""
    if timestamp.tzinfo is None or timestamp.utcoffset() is None:
        raise ValueError("Signing timestamp must be timezone-aware.")
    return timestamp.astimezone(UTC).strftime("%Y%m%dT%H%M%SZ")


def _hash_payload(body: Optional[str]) -> str:
    return hashlib.sha256((body or "").encode("utf-8")).hexdigest()


def _hmac_sha256(key: bytes, data: str) -> bytes:
    return hmac.new(key, data.encode("utf-8"), hashlib.sha256).digest()


def canonicalize_headers(headers: Dict[str, str]) -> tuple[str, str]:
    """
    Return the canonical headers block and the signed-header list.

    Names are lower-cased and sorted by code point. Headers must have unique
    names after lower-casing; on a collision the last value wins.
    """
    canonical = {}
    for key, value in headers.items():
        canonical[key.lower()] = value
    names = sorted(canonical)
    block = "".join(f"{name}:{canonical[name]}\n" for name in names)
    return block, ";".join(names)


def create_canonical_request(options: SignatureOptions) -> str:
    """Build the canonical request string for ``options``."""
    parsed = urlsplit(options.url)
    canonical_uri = parsed.path or "/"
    canonical_querystring = parsed.query or ""
    canonical_headers, signed_headers = canonicalize_headers(options.headers)

    return "\n".join([
        options.method,
        canonical_uri,
        canonical_querystring,
        canonical_headers,
        signed_headers,
        _hash_payload(options.body),
    ])


def create_string_to_sign(
    canonical_request: str,
    timestamp: str,
    region: str,
    service: str,
) -> str:
    date = timestamp[:8]
    credential_scope = f"{date}/{region}/{service}/{SCOPE_TERMINATOR}"
    canonical_request_hash = hashlib.sha256(
        canonical_request.encode("utf-8")
    ).hexdigest()

    return "\n".join([
        ALGORITHM,
        timestamp,
        credential_scope,
        canonical_request_hash,
    ])


def derive_signing_key(secret_access_key: str, date: str, region: str, service: str) -> bytes:
    """Derive the per-day, per-region, per-service signing key."""
    k_date = _hmac_sha256(f"{SECRET_KEY_PREFIX}{secret_access_key}".encode("utf-8"), date)
    k_region = _hmac_sha256(k_date, region)
    k_service = _hmac_sha256(k_region, service)
    return _hmac_sha256(k_service, SCOPE_TERMINATOR)


def calculate_signature(
    string_to_sign: str,
    secret_access_key: str,
    date: str,
    region: str,
    service: str,
) -> str:
    signing_key = derive_signing_key(secret_access_key, date, region, service)
    return hmac.new(
        signing_key,
        string_to_sign.encode("utf-8"),
        hashlib.sha256
    ).hexdigest()


class VolcEngineSigner:
    """
    Signs requests for the VolcEngine OpenAPI.

    A signer holds credentials and a service name only; every call to
    :meth:`sign` computes a fresh timestamp and signature.
    """

    def __init__(self, credentials: Credentials, service: str, host: str):
        self.credentials = credentials
        self.service = service
        self.host = host

    def sign(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> Dict[str, str]:
        """
        Sign a request and return its full header set, Authorization included.

        ``timestamp`` defaults to now and must be timezone-aware; naive
        datetimes raise ValueError.
        """
        if timestamp is None:
            timestamp = datetime.now(UTC)

        x_date = format_timestamp(timestamp)
        date = x_date[:8]

        signed = {
            key: value for key, value in (headers or {}).items()
            if key.lower() not in ("content-type", "host", "x-date")
        }
        signed["Content-Type"] = FORM_CONTENT_TYPE
        signed["Host"] = self.host
        signed["X-Date"] = x_date

        options = SignatureOptions(
            access_key_id=self.credentials.access_key_id,
            secret_access_key=self.credentials.secret_access_key,
            region=self.credentials.region,
            service=self.service,
            method=method.upper(),
            url=url,
            headers=signed,
            body=body,
            timestamp=x_date,
        )

        canonical_request = create_canonical_request(options)
        string_to_sign = create_string_to_sign(
            canonical_request, options.timestamp, options.region, options.service
        )
        signature = calculate_signature(
            string_to_sign,
            options.secret_access_key,
            options.date,
            options.region,
            options.service,
        )

        _, canonical_names = canonicalize_headers(signed)
        if canonical_names != SIGNED_HEADERS:
            logger.warning(
                "[VolcEngine][Signer] canonicalHeaders=%s advertised=%s; extra headers are signed "
                "but not listed in SignedHeaders",
                canonical_names,
                SIGNED_HEADERS,
            )
        logger.debug(
            "[VolcEngine][Signer] canonicalRequest=%r stringToSign=%r",
            canonical_request,
            string_to_sign,
        )

        signed["Authorization"] = (
            f"{ALGORITHM} Credential={options.access_key_id}/{date}/{options.region}/"
            f"{options.service}/{SCOPE_TERMINATOR}, "
            f"SignedHeaders={SIGNED_HEADERS}, Signature={signature}"
        )
        return signed
