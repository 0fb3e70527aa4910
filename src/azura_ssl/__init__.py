"""
azura-ssl - Offline self-signed certificate chains
===================================================

Issues a small chain of trust (root CA, server, client) for local and test
environments:
- One-line distinguished names ("/C=US/O=aaa/CN=localhost")
- Role based X.509v3 extension sets
- Subject alternative names (URIs and IPs)
- Self-signing and CA-signing
- Passphrase protected PEM keys (DES-EDE3-CBC)
- PKCS#12 archives for client certificates

Main modules:
- dn_parser: distinguished name parsing
- extensions / san: extension descriptors
- certificate_builder / signing: certificate construction and signature
- codec / pkcs12: key, certificate and archive encodings
- issuer / cli: end to end workflows
"""

__version__ = "0.1.0"

from . import config
from .certificate_builder import CertificateBuilder
from .codec import EncryptedKeyBlob, KeyEncryptionCodec, certificate_from_pem, certificate_to_pem
from .dn_parser import parse_dn
from .errors import (
    ArchiveError,
    AzuraSSLError,
    DecryptionError,
    NotFound,
    ParseError,
    SignatureMismatch,
    ValidationError,
)
from .extensions import extension_set, with_extensions
from .keygen import KeyGenerator
from .models import (
    AltNameEntry,
    AltNameKind,
    CertRole,
    ExtensionDescriptor,
    KeyPair,
    SignedCertificate,
    SubjectAttribute,
    UnsignedCertificate,
)
from .pkcs12 import PKCS12Packager
from .san import build_san
from .signing import SigningEngine

__all__ = [
    'config',
    'CertificateBuilder',
    'EncryptedKeyBlob',
    'KeyEncryptionCodec',
    'certificate_from_pem',
    'certificate_to_pem',
    'parse_dn',
    'AzuraSSLError',
    'ParseError',
    'ValidationError',
    'NotFound',
    'DecryptionError',
    'SignatureMismatch',
    'ArchiveError',
    'extension_set',
    'with_extensions',
    'KeyGenerator',
    'AltNameEntry',
    'AltNameKind',
    'CertRole',
    'ExtensionDescriptor',
    'KeyPair',
    'SignedCertificate',
    'SubjectAttribute',
    'UnsignedCertificate',
    'PKCS12Packager',
    'build_san',
    'SigningEngine'
]
