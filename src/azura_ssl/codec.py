"""
PEM codecs for private keys and certificates

Private keys are written in the legacy OpenSSL format: PKCS#1 body,
optionally wrapped with DES-EDE3-CBC and a DEK-Info header, which every
PEM tool (openssl, nginx, node-forge, ...) can read back.
"""

import base64
import logging
import os
from dataclasses import dataclass
from typing import Optional, Union

from cryptography import x509
from cryptography.hazmat.decrepit.ciphers.algorithms import TripleDES
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives import padding as sym_padding
from cryptography.hazmat.primitives.ciphers import Cipher, modes

from . import config
from .errors import DecryptionError, ParseError
from .models import PrivateKeyTypes, SignedCertificate

logger = logging.getLogger(__name__)

PEM_KEY_LABEL = "RSA PRIVATE KEY"
PEM_LINE_LENGTH = 64

# 3DES: 24 bytes key, 8 bytes block / IV
TRIPLE_DES_KEY_SIZE = 24
TRIPLE_DES_BLOCK_SIZE = 8


@dataclass(frozen=True)
class EncryptedKeyBlob:
    """
    PEM encoded private key, encrypted or not

    The cipher id and IV are read from the DEK-Info header when present.
    """
    pem: bytes

    @classmethod
    def from_pem(cls, data: Union[bytes, str]) -> "EncryptedKeyBlob":
        if isinstance(data, str):
            data = data.encode("ascii")
        return cls(pem=data)

    @property
    def headers(self) -> dict:
        """RFC 1421 headers of the PEM block (Proc-Type, DEK-Info)"""
        result = {}
        for line in self.pem.decode("ascii", errors="replace").splitlines()[1:]:
            if not line.strip() or ":" not in line:
                break
            name, _, value = line.partition(":")
            result[name.strip()] = value.strip()
        return result

    @property
    def encrypted(self) -> bool:
        return "ENCRYPTED" in self.headers.get("Proc-Type", "") or b"BEGIN ENCRYPTED PRIVATE KEY" in self.pem

    @property
    def cipher(self) -> Optional[str]:
        dek_info = self.headers.get("DEK-Info")
        return dek_info.split(",")[0] if dek_info else None

    @property
    def iv(self) -> Optional[bytes]:
        dek_info = self.headers.get("DEK-Info")
        if not dek_info or "," not in dek_info:
            return None
        return bytes.fromhex(dek_info.split(",", 1)[1])


def evp_bytes_to_key(password: bytes, salt: bytes, key_length: int) -> bytes:
    """
    OpenSSL EVP_BytesToKey with MD5 and a single iteration

    This is the key derivation used by encrypted legacy PEM keys, the
    salt being the first 8 bytes of the IV.
    """
    derived = b""
    block = b""
    while len(derived) < key_length:
        digest = hashes.Hash(hashes.MD5())
        digest.update(block + password + salt)
        block = digest.finalize()
        derived += block
    return derived[:key_length]


def _armor(label: str, body: bytes, headers: Optional[dict] = None) -> bytes:
    """Wrap DER bytes in a PEM block with optional RFC 1421 headers"""
    encoded = base64.b64encode(body).decode("ascii")
    lines = [f"-----BEGIN {label}-----"]
    if headers:
        lines.extend(f"{name}: {value}" for name, value in headers.items())
        lines.append("")
    lines.extend(encoded[i:i + PEM_LINE_LENGTH] for i in range(0, len(encoded), PEM_LINE_LENGTH))
    lines.append(f"-----END {label}-----")
    return ("\n".join(lines) + "\n").encode("ascii")


class KeyEncryptionCodec:
    """
    Encodes private keys to PEM and back, with optional passphrase protection
    """

    cipher_name = config.KEY_ENCRYPTION_CIPHER

    # ============================================
    # 🔒 ENCODING
    # ============================================

    def encode(self, private_key: PrivateKeyTypes, passphrase: Optional[str] = None) -> EncryptedKeyBlob:
        """
        Serialize a private key, encrypted when a passphrase is given

        Args:
            private_key: Key to serialize
            passphrase: Non-empty string to encrypt, None/"" for a plain key

        Returns:
            EncryptedKeyBlob: PEM encoded key
        """
        if not passphrase:
            pem = private_key.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.TraditionalOpenSSL,
                encryption_algorithm=serialization.NoEncryption()
            )
            logger.debug("Encoded private key without encryption")
            return EncryptedKeyBlob(pem=pem)

        der = private_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption()
        )

        iv = os.urandom(TRIPLE_DES_BLOCK_SIZE)
        key = evp_bytes_to_key(passphrase.encode("utf-8"), iv[:8], TRIPLE_DES_KEY_SIZE)

        padder = sym_padding.PKCS7(TRIPLE_DES_BLOCK_SIZE * 8).padder()
        padded = padder.update(der) + padder.finalize()

        encryptor = Cipher(TripleDES(key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()

        pem = _armor(PEM_KEY_LABEL, ciphertext, headers={
            "Proc-Type": "4,ENCRYPTED",
            "DEK-Info": f"{self.cipher_name},{iv.hex().upper()}",
        })
        logger.debug("Encoded private key with %s", self.cipher_name)
        return EncryptedKeyBlob(pem=pem)

    # ============================================
    # 🔓 DECODING
    # ============================================

    def decode(
            self,
            blob: Union[EncryptedKeyBlob, bytes, str],
            passphrase: Optional[str] = None
    ) -> PrivateKeyTypes:
        """
        Load a private key from its PEM encoding

        Args:
            blob: EncryptedKeyBlob or raw PEM
            passphrase: Passphrase of an encrypted key, ignored for a plain key

        Returns:
            Private key

        Raises:
            DecryptionError: Encrypted key with a missing or wrong passphrase
            ParseError: Plain payload that is not a private key
        """
        if not isinstance(blob, EncryptedKeyBlob):
            blob = EncryptedKeyBlob.from_pem(blob)

        if not blob.encrypted:
            try:
                return serialization.load_pem_private_key(blob.pem, password=None)
            except (ValueError, TypeError) as exc:
                raise ParseError(f"Could not parse private key: {exc}") from exc

        if not passphrase:
            raise DecryptionError("Private key is encrypted, a passphrase is required")

        try:
            return serialization.load_pem_private_key(blob.pem, password=passphrase.encode("utf-8"))
        except (ValueError, TypeError) as exc:
            raise DecryptionError(
                "Failed to decrypt private key, please check your passphrase."
            ) from exc


# ============================================
# 📜 CERTIFICATES
# ============================================

def certificate_to_pem(certificate: Union[SignedCertificate, x509.Certificate]) -> bytes:
    """PEM encoding of a certificate"""
    if isinstance(certificate, SignedCertificate):
        certificate = certificate.certificate
    return certificate.public_bytes(serialization.Encoding.PEM)


def certificate_from_pem(data: Union[bytes, str]) -> x509.Certificate:
    """
    Load a PEM certificate

    Raises:
        ParseError: If data is not a PEM certificate
    """
    if isinstance(data, str):
        data = data.encode("ascii")
    try:
        return x509.load_pem_x509_certificate(data)
    except ValueError as exc:
        raise ParseError(f"Could not parse certificate: {exc}") from exc


__all__ = [
    'EncryptedKeyBlob',
    'KeyEncryptionCodec',
    'evp_bytes_to_key',
    'certificate_to_pem',
    'certificate_from_pem'
]
