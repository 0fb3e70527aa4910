"""
Certificate Builder
Generates the key pair and the unsigned certificate template
"""

import logging
from typing import Iterable, Optional, Tuple, Union

from . import config, utils
from .errors import ValidationError
from .keygen import KeyGenerator
from .models import (
    ExtensionDescriptor,
    PrivateKeyTypes,
    SubjectAttribute,
    UnsignedCertificate,
    parse_serial,
)

logger = logging.getLogger(__name__)


class CertificateBuilder:
    """
    Produces UnsignedCertificate values, never touches a CA
    """

    def __init__(self, key_gen: Optional[KeyGenerator] = None):
        self.key_gen = key_gen or KeyGenerator()

    def build(
            self,
            ttl_years: int,
            subject: Iterable[SubjectAttribute],
            extensions: Iterable[ExtensionDescriptor],
            serial: Union[str, int],
            key_bits: int = config.DEFAULT_KEY_SIZE
    ) -> Tuple[PrivateKeyTypes, UnsignedCertificate]:
        """
        Generate a key pair and the certificate template around its public key

        Args:
            ttl_years: Validity in calendar years
            subject: Ordered subject attributes
            extensions: Extension descriptors, attached verbatim
            serial: Serial number, hex string ("01") or int
            key_bits: RSA modulus size

        Returns:
            tuple: (private_key, UnsignedCertificate)

        Raises:
            ValidationError: On a non positive TTL, an invalid serial or an unsafe key size
        """
        if isinstance(ttl_years, bool) or not isinstance(ttl_years, int) or ttl_years < 1:
            raise ValidationError(f"TTL must be a positive number of years, got {ttl_years!r}")

        serial_number = parse_serial(serial)
        key_pair = self.key_gen.generate_rsa_key(key_bits)

        not_before = utils.now_utc()
        not_after = utils.add_years(not_before, ttl_years)

        unsigned = UnsignedCertificate(
            public_key=key_pair.public_key,
            serial_number=serial_number,
            not_before=not_before,
            not_after=not_after,
            subject=tuple(subject),
            extensions=tuple(extensions)
        )

        logger.info("Built certificate template (SN: %02X, valid until %s)",
                    serial_number, utils.format_datetime(not_after))

        return key_pair.private_key, unsigned


__all__ = ['CertificateBuilder']
