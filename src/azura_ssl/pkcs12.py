"""
PKCS#12 Packager
Bundles a client key, its certificate and the CA certificate for distribution
"""

import logging
from typing import Optional, Union

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.serialization import pkcs12

from . import config
from .errors import ArchiveError
from .models import PrivateKeyTypes, SignedCertificate

logger = logging.getLogger(__name__)

CertificateLike = Union[SignedCertificate, x509.Certificate]


def _as_x509(certificate: CertificateLike) -> x509.Certificate:
    if isinstance(certificate, SignedCertificate):
        return certificate.certificate
    return certificate


class PKCS12Packager:
    """
    Produces password protected PKCS#12 archives

    Archives use PBE-SHA1-3DES with a SHA-1 MAC so that browsers and OS
    keychains can import them.
    """

    def __init__(self, kdf_rounds: int = config.PKCS12_KDF_ROUNDS):
        self.kdf_rounds = kdf_rounds

    def _encryption(self, passphrase: Optional[str]) -> serialization.KeySerializationEncryption:
        if not passphrase:
            logger.warning("PKCS#12 archive is not password protected")
            return serialization.NoEncryption()

        return (
            serialization.PrivateFormat.PKCS12.encryption_builder()
            .kdf_rounds(self.kdf_rounds)
            .key_cert_algorithm(pkcs12.PBES.PBESv1SHA1And3KeyTripleDESCBC)
            .hmac_hash(hashes.SHA1())
            .build(passphrase.encode("utf-8"))
        )

    def package(
            self,
            client_key: PrivateKeyTypes,
            client_cert: CertificateLike,
            ca_cert: CertificateLike,
            export_passphrase: Optional[str],
            friendly_name: Optional[str] = None
    ) -> bytes:
        """
        Build a PKCS#12 archive

        Args:
            client_key: Private key of the client certificate
            client_cert: Client certificate
            ca_cert: Certificate of the signing CA
            export_passphrase: Archive password ("" leaves the archive unencrypted)
            friendly_name: Label shown by the importing application

        Returns:
            bytes: DER encoded PKCS#12 archive

        Raises:
            ArchiveError: If a credential is missing
        """
        missing = [
            label for label, value in (
                ("client key", client_key),
                ("client certificate", client_cert),
                ("CA certificate", ca_cert),
            ) if value is None
        ]
        if missing:
            raise ArchiveError(f"Cannot build PKCS#12 archive, missing: {', '.join(missing)}")

        name = friendly_name.encode("utf-8") if friendly_name else None

        try:
            archive = pkcs12.serialize_key_and_certificates(
                name=name,
                key=client_key,
                cert=_as_x509(client_cert),
                cas=[_as_x509(ca_cert)],
                encryption_algorithm=self._encryption(export_passphrase)
            )
        except (TypeError, ValueError) as exc:
            raise ArchiveError(f"Cannot build PKCS#12 archive: {exc}") from exc

        logger.info("Packaged PKCS#12 archive (%d bytes)", len(archive))
        return archive


__all__ = ['PKCS12Packager']
