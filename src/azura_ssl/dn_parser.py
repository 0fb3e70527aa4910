"""
Parser of OpenSSL one-line distinguished names ("/C=US/O=aaa/CN=host")
"""

import logging
from typing import Tuple

from .errors import ParseError
from .models import SubjectAttribute

logger = logging.getLogger(__name__)


def parse_dn(text: str) -> Tuple[SubjectAttribute, ...]:
    """
    Parse a one-line distinguished name into ordered subject attributes

    The leading slash is mandatory, each following segment is split on
    its first "=". Duplicated types are kept in input order.

    Args:
        text: Distinguished name (ex: "/C=US/O=aaa")

    Returns:
        tuple: SubjectAttribute values, empty for an empty string

    Raises:
        ParseError: If the leading slash is missing, or a segment has no "="
            or an empty type/value
    """
    if not text:
        return ()

    if not text.startswith('/'):
        raise ParseError(f"Subjects malformed, missing leading \"/\": {text}")

    segments = text.split('/')[1:]
    attributes = []

    for segment in segments:
        if not segment:
            continue

        attr_type, sep, value = segment.partition('=')
        if not sep or not attr_type or not value:
            raise ParseError(f"Subjects malformed: {segment}")

        attributes.append(SubjectAttribute(type=attr_type, value=value))

    logger.debug("Parsed %d subject attribute(s) from %r", len(attributes), text)
    return tuple(attributes)


__all__ = ['parse_dn']
