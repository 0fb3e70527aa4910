"""
Certificate Issuer
Runs the build -> sign -> encode -> persist pipeline for each role
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple

from cryptography import x509

from . import config, storage, utils
from .certificate_builder import CertificateBuilder
from .codec import KeyEncryptionCodec, certificate_to_pem
from .extensions import extension_set, with_extensions
from .models import CertRole, ExtensionDescriptor, PrivateKeyTypes, SignedCertificate, SubjectAttribute
from .pkcs12 import PKCS12Packager
from .signing import SigningEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedCertificate:
    """Outcome of one issuance: the signed certificate and the written files"""
    certificate: SignedCertificate
    private_key: PrivateKeyTypes
    key_path: Path
    cert_path: Path
    p12_path: Optional[Path] = None

    @property
    def paths(self) -> Tuple[Path, ...]:
        return tuple(p for p in (self.key_path, self.cert_path, self.p12_path) if p is not None)


def artifact_base(filename: str, out_dir: Path) -> Path:
    """
    Base path of the artefacts, the extension of filename is dropped

    Args:
        filename: Name given on the command line (ex: "server.crt")
        out_dir: Directory the relative names are resolved against

    Returns:
        Path: ex: out_dir / "server"
    """
    path = Path(filename)
    if not path.is_absolute():
        path = Path(out_dir) / path
    return path.with_suffix("")


class CertificateIssuer:
    """
    Issues CA, server and client certificates
    """

    def __init__(
            self,
            builder: Optional[CertificateBuilder] = None,
            signer: Optional[SigningEngine] = None,
            codec: Optional[KeyEncryptionCodec] = None,
            packager: Optional[PKCS12Packager] = None
    ):
        self.builder = builder or CertificateBuilder()
        self.signer = signer or SigningEngine()
        self.codec = codec or KeyEncryptionCodec()
        self.packager = packager or PKCS12Packager()

    # ============================================
    # 👑 ROOT CA
    # ============================================

    def create_ca(
            self,
            base_path: Path,
            subject: Sequence[SubjectAttribute],
            passphrase: Optional[str] = None,
            key_bits: int = config.DEFAULT_KEY_SIZE
    ) -> IssuedCertificate:
        """
        Create a self-signed CA and write <base>.key / <base>.crt

        Args:
            base_path: Output path without extension
            subject: CA subject
            passphrase: Encrypts the CA key when non-empty
            key_bits: RSA key size

        Returns:
            IssuedCertificate: CA certificate, key and written paths
        """
        utils.print_header(f"{config.CLI_SYMBOLS['ca']} Root CA")
        defaults = config.get_role_defaults(CertRole.CA.value)

        utils.print_info("Step 1/3: generating key and certificate template...")
        private_key, unsigned = self.builder.build(
            ttl_years=defaults["ttl_years"],
            subject=subject,
            extensions=extension_set(CertRole.CA),
            serial=defaults["serial"],
            key_bits=key_bits
        )

        utils.print_info("Step 2/3: self-signing...")
        signed = self.signer.self_sign(unsigned, private_key)

        utils.print_info("Step 3/3: writing files...")
        if not passphrase:
            utils.print_warning("CA private key is NOT encrypted (no passphrase)")

        return self._persist(base_path, signed, private_key, passphrase)

    # ============================================
    # 🖥️ SERVER
    # ============================================

    def issue_server(
            self,
            base_path: Path,
            subject: Sequence[SubjectAttribute],
            ca_key: PrivateKeyTypes,
            ca_cert: x509.Certificate,
            san: Iterable[ExtensionDescriptor] = (),
            key_bits: int = config.DEFAULT_KEY_SIZE
    ) -> IssuedCertificate:
        """
        Create a CA-signed server certificate and write <base>.key / <base>.crt

        Args:
            base_path: Output path without extension
            subject: Server subject
            ca_key: CA private key
            ca_cert: CA certificate
            san: Optional subjectAltName descriptor (see build_san)
            key_bits: RSA key size
        """
        utils.print_header(f"{config.CLI_SYMBOLS['server']} Server certificate")
        defaults = config.get_role_defaults(CertRole.SERVER.value)

        utils.print_info("Step 1/3: generating key and certificate template...")
        private_key, unsigned = self.builder.build(
            ttl_years=defaults["ttl_years"],
            subject=subject,
            extensions=with_extensions(CertRole.SERVER, san),
            serial=defaults["serial"],
            key_bits=key_bits
        )

        utils.print_info("Step 2/3: signing with the CA...")
        signed = self.signer.ca_sign(unsigned, ca_key, ca_cert)

        utils.print_info("Step 3/3: writing files...")
        return self._persist(base_path, signed, private_key)

    # ============================================
    # 👤 CLIENT
    # ============================================

    def issue_client(
            self,
            base_path: Path,
            subject: Sequence[SubjectAttribute],
            ca_key: PrivateKeyTypes,
            ca_cert: x509.Certificate,
            export_passphrase: Optional[str] = None,
            friendly_name: Optional[str] = None,
            key_bits: int = config.DEFAULT_KEY_SIZE
    ) -> IssuedCertificate:
        """
        Create a CA-signed client certificate plus its PKCS#12 archive

        Writes <base>.key, <base>.crt and <base>.p12.

        Args:
            base_path: Output path without extension
            subject: Client subject
            ca_key: CA private key
            ca_cert: CA certificate
            export_passphrase: Password of the PKCS#12 archive
            friendly_name: Label stored in the archive
            key_bits: RSA key size
        """
        utils.print_header(f"{config.CLI_SYMBOLS['client']} Client certificate")
        defaults = config.get_role_defaults(CertRole.CLIENT.value)

        utils.print_info("Step 1/4: generating key and certificate template...")
        private_key, unsigned = self.builder.build(
            ttl_years=defaults["ttl_years"],
            subject=subject,
            extensions=extension_set(CertRole.CLIENT),
            serial=defaults["serial"],
            key_bits=key_bits
        )

        utils.print_info("Step 2/4: signing with the CA...")
        signed = self.signer.ca_sign(unsigned, ca_key, ca_cert)

        utils.print_info("Step 3/4: packaging PKCS#12 archive...")
        archive = self.packager.package(
            client_key=private_key,
            client_cert=signed,
            ca_cert=ca_cert,
            export_passphrase=export_passphrase,
            friendly_name=friendly_name
        )

        utils.print_info("Step 4/4: writing files...")
        base_path = Path(base_path)
        issued = self._persist(base_path, signed, private_key)
        p12_path = storage.persist(archive, base_path.with_name(base_path.name + config.PKCS12_SUFFIX),
                                   config.PRIVATE_KEY_PERMISSIONS)

        return IssuedCertificate(
            certificate=issued.certificate,
            private_key=issued.private_key,
            key_path=issued.key_path,
            cert_path=issued.cert_path,
            p12_path=p12_path
        )

    # ============================================
    # 💾 OUTPUT
    # ============================================

    def _persist(
            self,
            base_path: Path,
            signed: SignedCertificate,
            private_key: PrivateKeyTypes,
            passphrase: Optional[str] = None
    ) -> IssuedCertificate:
        """Write the key and certificate next to each other"""
        base_path = Path(base_path)
        blob = self.codec.encode(private_key, passphrase)
        logger.debug("Writing %s certificate artefacts under %s",
                     signed.certificate.subject.rfc4514_string(), base_path)

        key_path = storage.persist(blob.pem, base_path.with_name(base_path.name + config.KEY_SUFFIX),
                                   config.PRIVATE_KEY_PERMISSIONS)
        cert_path = storage.persist(certificate_to_pem(signed),
                                    base_path.with_name(base_path.name + config.CERT_SUFFIX),
                                    config.CERT_PERMISSIONS)

        utils.display_cert_info(signed.certificate)

        return IssuedCertificate(
            certificate=signed,
            private_key=private_key,
            key_path=key_path,
            cert_path=cert_path
        )


__all__ = ['CertificateIssuer', 'IssuedCertificate', 'artifact_base']
