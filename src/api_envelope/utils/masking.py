"""
Sensitive data masking for logs.

- mask_sensitive_data(data): redact values under sensitive keys, recursively
- partial_mask(value): keep a prefix/suffix, hide the middle
- mask_email(email) / mask_ip_address(ip): shape-preserving masks
- MaskingProcessor: structlog processor applying mask_sensitive_data

Cyclic structures are not supported by mask_sensitive_data.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

MASK_STRING = "***MASKED***"

DEFAULT_SENSITIVE_FIELDS: frozenset[str] = frozenset(
    name.lower()
    for name in (
        "password",
        "passwordConfirm",
        "currentPassword",
        "newPassword",
        "token",
        "accessToken",
        "refreshToken",
        "secret",
        "apiKey",
        "api_key",
        "authorization",
        "creditCard",
        "credit_card",
        "cardNumber",
        "card_number",
        "cvv",
        "ssn",
        "socialSecurityNumber",
        "pin",
        "otp",
        "verificationCode",
        "privateKey",
        "private_key",
    )
)


def _normalize_fields(sensitive_fields: Iterable[str]) -> frozenset[str]:
    if sensitive_fields is DEFAULT_SENSITIVE_FIELDS:
        return DEFAULT_SENSITIVE_FIELDS
    return frozenset(str(f).lower() for f in sensitive_fields)


def _mask(value: Any, fields: frozenset[str]) -> Any:
    if isinstance(value, Mapping):
        masked: dict[Any, Any] = {}
        for key, item in value.items():
            if str(key).lower() in fields:
                masked[key] = MASK_STRING
            else:
                masked[key] = _mask(item, fields)
        return masked
    if isinstance(value, list):
        return [_mask(item, fields) for item in value]
    if isinstance(value, tuple):
        return tuple(_mask(item, fields) for item in value)
    return value


def mask_sensitive_data(data: Any, sensitive_fields: Iterable[str] = DEFAULT_SENSITIVE_FIELDS) -> Any:
    """
    Return a copy of `data` with every value under a sensitive key replaced by MASK_STRING.

    Keys are matched case-insensitively. Mappings, lists and tuples are walked
    at every depth; anything else (including None) is returned as-is. The
    input is never mutated.
    """
    return _mask(data, _normalize_fields(sensitive_fields))


def partial_mask(value: Any, visible_start: int = 4, visible_end: int = 4) -> str:
    """
    Show `visible_start` leading and `visible_end` trailing characters.

    At most 8 asterisks replace the hidden middle. Values too short to reveal
    anything are fully masked.
    """
    if not value or not isinstance(value, str):
        return MASK_STRING
    if len(value) <= visible_start + visible_end:
        return MASK_STRING
    start = value[:visible_start]
    end = value[len(value) - visible_end:]
    hidden = min(len(value) - visible_start - visible_end, 8)
    return f"{start}{'*' * hidden}{end}"


def mask_email(email: Any) -> str:
    """john.doe@example.com -> j***e@e***.com"""
    if not email or not isinstance(email, str) or "@" not in email:
        return MASK_STRING

    parts = email.split("@")
    username, domain = parts[0], parts[1]
    masked_username = f"{username[0]}***{username[-1]}" if len(username) > 2 else "***"

    domain_parts = domain.split(".")
    if len(domain_parts) > 1:
        masked_domain = f"{domain_parts[0][:1]}***.{domain_parts[-1]}"
    else:
        masked_domain = "***"

    return f"{masked_username}@{masked_domain}"


def mask_ip_address(ip: Any) -> str:
    """192.168.1.100 -> 192.***.***, 2001:db8::1 -> 2001:****:****"""
    if not ip or not isinstance(ip, str):
        return MASK_STRING
    if "." in ip and ":" not in ip:
        return f"{ip.split('.')[0]}.***.***"
    if ":" in ip:
        return f"{ip.split(':')[0]}:****:****"
    return MASK_STRING


class MaskingProcessor:
    """
    Structlog processor that masks sensitive keys anywhere in the event dict.

    Already-masked values are left alone, so running it over a context that
    was masked upstream changes nothing.
    """

    def __init__(self, sensitive_fields: Iterable[str] = DEFAULT_SENSITIVE_FIELDS) -> None:
        self._fields = _normalize_fields(sensitive_fields)

    def __call__(self, logger, method_name, event_dict):
        return _mask(event_dict, self._fields)
