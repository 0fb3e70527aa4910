"""
Signing Engine
Self-signs root certificates and signs leaf certificates with a CA
"""

import logging
from typing import Optional

from cryptography import x509
from cryptography.hazmat.primitives import hashes

from . import config
from .errors import SignatureMismatch, ValidationError
from .extensions import to_x509_extension
from .models import (
    PrivateKeyTypes,
    PublicKeyTypes,
    SignedCertificate,
    UnsignedCertificate,
    attributes_from_name,
    to_x509_name,
)

logger = logging.getLogger(__name__)


def keys_match(private_key: PrivateKeyTypes, public_key: PublicKeyTypes) -> bool:
    """True when public_key is the public half of private_key"""
    return private_key.public_key().public_numbers() == public_key.public_numbers()


class SigningEngine:
    """
    Turns an UnsignedCertificate into a SignedCertificate

    Pure in-memory operations: the CA key and certificate are only read.
    """

    def __init__(self, algorithm: Optional[hashes.HashAlgorithm] = None):
        self.algorithm = algorithm or getattr(hashes, config.DEFAULT_HASH_ALGORITHM)()

    # ============================================
    # 👑 SELF-SIGNED (ROOT CA)
    # ============================================

    def self_sign(self, unsigned: UnsignedCertificate, private_key: PrivateKeyTypes) -> SignedCertificate:
        """
        Sign a certificate with its own key, issuer = subject

        Args:
            unsigned: Certificate template
            private_key: Private half of unsigned.public_key

        Returns:
            SignedCertificate: Self-signed certificate

        Raises:
            SignatureMismatch: If private_key does not belong to the template
        """
        if not keys_match(private_key, unsigned.public_key):
            raise SignatureMismatch("Private key does not match the certificate public key")

        subject = to_x509_name(unsigned.subject)
        certificate = self._sign(
            unsigned,
            issuer_name=subject,
            issuer_public_key=unsigned.public_key,
            signing_key=private_key
        )

        logger.info("Self-signed certificate %s", subject.rfc4514_string())
        return SignedCertificate(unsigned=unsigned, issuer=unsigned.subject, certificate=certificate)

    # ============================================
    # 📜 CA-SIGNED (SERVER / CLIENT)
    # ============================================

    def ca_sign(
            self,
            unsigned: UnsignedCertificate,
            ca_private_key: PrivateKeyTypes,
            ca_certificate: x509.Certificate
    ) -> SignedCertificate:
        """
        Sign a certificate with a CA, issuer = CA subject

        Args:
            unsigned: Certificate template
            ca_private_key: Private key of the CA
            ca_certificate: Certificate of the CA

        Returns:
            SignedCertificate: CA-signed certificate

        Raises:
            SignatureMismatch: If the CA key and certificate are not a pair
        """
        ca_public_key = ca_certificate.public_key()
        if not keys_match(ca_private_key, ca_public_key):
            raise SignatureMismatch(
                "CA private key does not match the CA certificate "
                f"({ca_certificate.subject.rfc4514_string()})"
            )

        certificate = self._sign(
            unsigned,
            issuer_name=ca_certificate.subject,
            issuer_public_key=ca_public_key,
            signing_key=ca_private_key
        )

        logger.info("Signed certificate %s with CA %s",
                    certificate.subject.rfc4514_string(), ca_certificate.subject.rfc4514_string())
        return SignedCertificate(
            unsigned=unsigned,
            issuer=attributes_from_name(ca_certificate.subject),
            certificate=certificate
        )

    # ============================================
    # 🔧 X.509 ENCODING
    # ============================================

    def _sign(
            self,
            unsigned: UnsignedCertificate,
            issuer_name: x509.Name,
            issuer_public_key: PublicKeyTypes,
            signing_key: PrivateKeyTypes
    ) -> x509.Certificate:
        """Encode the template with its issuer and sign it"""
        cert_builder = (
            x509.CertificateBuilder()
            .subject_name(to_x509_name(unsigned.subject))
            .issuer_name(issuer_name)
            .public_key(unsigned.public_key)
            .serial_number(unsigned.serial_number)
            .not_valid_before(unsigned.not_before)
            .not_valid_after(unsigned.not_after)
        )

        try:
            for descriptor in unsigned.extensions:
                cert_builder = cert_builder.add_extension(
                    to_x509_extension(descriptor),
                    critical=descriptor.critical
                )

            cert_builder = cert_builder.add_extension(
                x509.SubjectKeyIdentifier.from_public_key(unsigned.public_key),
                critical=False
            )
            cert_builder = cert_builder.add_extension(
                x509.AuthorityKeyIdentifier.from_issuer_public_key(issuer_public_key),
                critical=False
            )
        except ValidationError:
            raise
        except ValueError as exc:
            # duplicated extension in the template
            raise ValidationError(f"Invalid extension set: {exc}") from exc

        return cert_builder.sign(private_key=signing_key, algorithm=self.algorithm)


__all__ = ['SigningEngine', 'keys_match']
