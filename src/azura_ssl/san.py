"""
Subject Alternative Name builder
Turns comma separated URI / IP lists into a subjectAltName descriptor
"""

import ipaddress
import logging
from typing import List, Tuple

from .errors import ValidationError
from .models import AltNameEntry, AltNameKind, ExtensionDescriptor

logger = logging.getLogger(__name__)


def split_list(text: str, label: str) -> List[str]:
    """
    Split a comma separated list, trimming whitespace around each token

    A blank string yields no token at all.

    Raises:
        ValidationError: On an empty token (ex: "a.com,,b.com")
    """
    if text is None or not text.strip():
        return []

    tokens = [token.strip() for token in text.split(',')]
    for position, token in enumerate(tokens):
        if not token:
            raise ValidationError(f"Empty {label} at position {position + 1} in {text!r}")

    return tokens


def build_san(uris: str, ips: str) -> Tuple[ExtensionDescriptor, ...]:
    """
    Build the subjectAltName extension for a server certificate

    Args:
        uris: Comma separated URIs (ex: "a.com, b.com")
        ips: Comma separated IP addresses (ex: "127.0.0.1, ::1")

    Returns:
        tuple: One SAN descriptor, URI entries first then IP entries

    Raises:
        ValidationError: On empty tokens, invalid IPs or no entry at all
    """
    alt_names = [AltNameEntry(AltNameKind.URI, uri) for uri in split_list(uris, "URI")]

    for ip in split_list(ips, "IP"):
        try:
            ipaddress.ip_address(ip)
        except ValueError as exc:
            raise ValidationError(f"Invalid IP address: {ip}") from exc
        alt_names.append(AltNameEntry(AltNameKind.IP, ip))

    if not alt_names:
        raise ValidationError("At least one alternative URI or IP is required")

    logger.debug("Subject alternative names: %s", ", ".join(entry.value for entry in alt_names))

    return (ExtensionDescriptor(
        name="subjectAltName",
        critical=False,
        fields={"altNames": tuple(alt_names)}
    ),)


__all__ = ['build_san', 'split_list']
