import logging
import re
from datetime import datetime, timedelta, timezone, UTC

import pytest

from volcecs._signer import (
    SIGNED_HEADERS,
    VolcEngineSigner,
    calculate_signature,
    canonicalize_headers,
    create_canonical_request,
    create_string_to_sign,
    derive_signing_key,
    format_timestamp,
)
from volcecs.models import Credentials, SignatureOptions


HOST = "open.volcengineapi.com"
URL = f"https://{HOST}"
BODY = "Action=DescribeTasks&Version=2020-04-01"
TIMESTAMP = "20240101T000000Z"

# Reference values computed independently with openssl dgst -sha256 -mac HMAC.
GOLDEN_SIGNING_KEY = "66bd161dbf680c44c857dcaea5edf7dd00fc429c2e6b452b3f86f28463dd9d79"
GOLDEN_HELLO_SIGNATURE = "37f14eb7ea824505be127d1c7058f5aaf1298a5c81752d41ccb0306843508ab2"
GOLDEN_PAYLOAD_HASH = "510f363391e3e8e993ca152a9181dd1cae0bd8a4bb88186186b5e583eb89adbf"
GOLDEN_CANONICAL_HASH = "1658be1c4b972e0c42aa4cb9f24d1c0da40392daf6a5d139c05a6a6cd71bdc5a"
GOLDEN_SIGNATURE = "1c3e000e6827320b32bcf542f1a5528db8a62e9d8998c788cdcaf013913b6cb3"
EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def _options(**overrides) -> SignatureOptions:
    values = dict(
        access_key_id="AK",
        secret_access_key="SK",
        region="cn-beijing",
        service="ecs",
        method="POST",
        url=URL,
        headers={
            "Content-Type": "application/x-www-form-urlencoded",
            "Host": HOST,
            "X-Date": TIMESTAMP,
        },
        body=BODY,
        timestamp=TIMESTAMP,
    )
    values.update(overrides)
    return SignatureOptions(**values)


def test_canonical_headers_are_lowercased_and_sorted():
    block, signed = canonicalize_headers({"Host": "h", "Content-Type": "c", "X-Date": "d"})

    assert block == "content-type:c\nhost:h\nx-date:d\n"
    assert signed == "content-type;host;x-date"


def test_canonical_headers_keep_values_verbatim():
    block, _ = canonicalize_headers({"X-Custom": "  padded value "})

    assert block == "x-custom:  padded value \n"


def test_duplicate_header_names_after_lowercasing_last_wins():
    # Headers must have unique names after lower-casing; collisions are undefined.
    block, signed = canonicalize_headers({"Host": "first", "host": "second"})

    assert signed == "host"
    assert block == "host:second\n"


def test_canonical_request_layout():
    canonical = create_canonical_request(_options())

    assert canonical == "\n".join([
        "POST",
        "/",
        "",
        "content-type:application/x-www-form-urlencoded\n"
        f"host:{HOST}\n"
        f"x-date:{TIMESTAMP}\n",
        "content-type;host;x-date",
        GOLDEN_PAYLOAD_HASH,
    ])


def test_canonical_request_path_and_raw_query():
    canonical = create_canonical_request(
        _options(url=f"{URL}/v1/images?b=2&a=1", headers={"Host": HOST}, body=None)
    )
    method, uri, query, *_rest, payload_hash = canonical.split("\n")

    assert method == "POST"
    assert uri == "/v1/images"
    assert query == "b=2&a=1"
    assert payload_hash == EMPTY_SHA256


def test_canonical_request_is_deterministic():
    assert create_canonical_request(_options()) == create_canonical_request(_options())


def test_string_to_sign():
    canonical = create_canonical_request(_options())
    string_to_sign = create_string_to_sign(canonical, TIMESTAMP, "cn-beijing", "ecs")

    assert string_to_sign == (
        "HMAC-SHA256\n"
        f"{TIMESTAMP}\n"
        "20240101/cn-beijing/ecs/request\n"
        f"{GOLDEN_CANONICAL_HASH}"
    )
    assert string_to_sign == create_string_to_sign(canonical, TIMESTAMP, "cn-beijing", "ecs")


def test_signing_key_golden_value():
    key = derive_signing_key("SK", "20240101", "cn-beijing", "ecs")

    assert key.hex() == GOLDEN_SIGNING_KEY


def test_signature_golden_value():
    signature = calculate_signature("hello", "SK", "20240101", "cn-beijing", "ecs")

    assert signature == GOLDEN_HELLO_SIGNATURE


def test_signature_changes_with_secret_or_date():
    # A different secret or date must not reproduce the signature.
    assert calculate_signature("hello", "volcSK", "20240101", "cn-beijing", "ecs") \
        != GOLDEN_HELLO_SIGNATURE
    assert calculate_signature("hello", "SK", "20240102", "cn-beijing", "ecs") \
        != GOLDEN_HELLO_SIGNATURE


def test_format_timestamp_strips_punctuation():
    ts = datetime(2024, 3, 5, 7, 8, 9, 123000, tzinfo=UTC)

    assert format_timestamp(ts) == "20240305T070809Z"


def test_format_timestamp_converts_offsets_to_utc():
    ts = datetime(2024, 3, 5, 15, 8, 9, tzinfo=timezone(timedelta(hours=8)))

    assert format_timestamp(ts) == "20240305T070809Z"


def test_naive_timestamp_is_rejected():
    signer = VolcEngineSigner(Credentials("AK", "SK", "cn-beijing"), "ecs", HOST)

    with pytest.raises(ValueError, match="timezone-aware"):
        format_timestamp(datetime(2024, 1, 1))
    with pytest.raises(ValueError, match="timezone-aware"):
        signer.sign("POST", URL, body=BODY, timestamp=datetime(2024, 1, 1))


def test_signer_produces_golden_authorization_header():
    signer = VolcEngineSigner(Credentials("AK", "SK", "cn-beijing"), "ecs", HOST)

    headers = signer.sign(
        "POST", URL, body=BODY, timestamp=datetime(2024, 1, 1, tzinfo=UTC)
    )

    assert headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert headers["Host"] == HOST
    assert headers["X-Date"] == TIMESTAMP
    assert headers["Authorization"] == (
        "HMAC-SHA256 Credential=AK/20240101/cn-beijing/ecs/request, "
        f"SignedHeaders=content-type;host;x-date, Signature={GOLDEN_SIGNATURE}"
    )


def test_signer_overrides_caller_signing_headers():
    signer = VolcEngineSigner(Credentials("AK", "SK", "cn-beijing"), "ecs", HOST)

    headers = signer.sign(
        "POST",
        URL,
        headers={"content-type": "text/plain", "HOST": "evil.example.com", "x-date": "19700101T000000Z"},
        body=BODY,
        timestamp=datetime(2024, 1, 1, tzinfo=UTC),
    )

    assert headers["Authorization"].endswith(f"Signature={GOLDEN_SIGNATURE}")
    assert "content-type" not in headers
    assert "HOST" not in headers
    assert "x-date" not in headers


def test_signer_uses_fresh_timestamp():
    signer = VolcEngineSigner(Credentials("AK", "SK", "cn-beijing"), "ecs", HOST)

    headers = signer.sign("POST", URL, body=BODY)

    assert re.fullmatch(r"\d{8}T\d{6}Z", headers["X-Date"])
    date = headers["X-Date"][:8]
    assert f"Credential=AK/{date}/cn-beijing/ecs/request" in headers["Authorization"]


def test_signer_keeps_fixed_signed_headers_with_extra_headers(caplog):
    signer = VolcEngineSigner(Credentials("AK", "SK", "cn-beijing"), "ecs", HOST)

    with caplog.at_level(logging.WARNING, logger="volcecs._signer"):
        headers = signer.sign(
            "POST",
            URL,
            headers={"X-Trace-Id": "abc"},
            body=BODY,
            timestamp=datetime(2024, 1, 1, tzinfo=UTC),
        )

    assert f"SignedHeaders={SIGNED_HEADERS}," in headers["Authorization"]
    # The extra header is canonicalized, so the signature changes.
    assert not headers["Authorization"].endswith(GOLDEN_SIGNATURE)
    assert headers["X-Trace-Id"] == "abc"
    assert "x-trace-id" in caplog.text
