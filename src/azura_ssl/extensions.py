"""
X.509v3 extension sets per certificate role
Read-only tables plus the conversion to cryptography extension objects
"""

import ipaddress
from types import MappingProxyType
from typing import Iterable, Tuple, Union

from cryptography import x509
from cryptography.x509.oid import ExtendedKeyUsageOID

from .errors import ValidationError
from .models import AltNameKind, CertRole, ExtensionDescriptor, role_of

# Flag names follow https://www.openssl.org/docs/manmaster/man5/x509v3_config.html

CA_EXTENSION_SET = (
    ExtensionDescriptor(
        name="basicConstraints",
        critical=True,
        fields={"cA": True}
    ),
    ExtensionDescriptor(
        name="keyUsage",
        critical=True,
        fields={"digitalSignature": True, "keyCertSign": True, "cRLSign": True}
    ),
)

SERVER_EXTENSION_SET = (
    ExtensionDescriptor(
        name="basicConstraints",
        critical=True,
        fields={"cA": False}
    ),
    ExtensionDescriptor(
        name="keyUsage",
        critical=True,
        fields={"digitalSignature": True, "keyEncipherment": True}
    ),
    ExtensionDescriptor(
        name="extKeyUsage",
        critical=True,
        fields={"serverAuth": True, "clientAuth": True}
    ),
)

# Same usages as a server certificate, never carries alt names
CLIENT_EXTENSION_SET = tuple(SERVER_EXTENSION_SET)

EXTENSION_SETS = MappingProxyType({
    CertRole.CA: CA_EXTENSION_SET,
    CertRole.SERVER: SERVER_EXTENSION_SET,
    CertRole.CLIENT: CLIENT_EXTENSION_SET,
})

# keyUsage flag -> cryptography.x509.KeyUsage argument
KEY_USAGE_FLAGS = {
    "digitalSignature": "digital_signature",
    "nonRepudiation": "content_commitment",
    "keyEncipherment": "key_encipherment",
    "dataEncipherment": "data_encipherment",
    "keyAgreement": "key_agreement",
    "keyCertSign": "key_cert_sign",
    "cRLSign": "crl_sign",
    "encipherOnly": "encipher_only",
    "decipherOnly": "decipher_only",
}

EXT_KEY_USAGE_OIDS = {
    "serverAuth": ExtendedKeyUsageOID.SERVER_AUTH,
    "clientAuth": ExtendedKeyUsageOID.CLIENT_AUTH,
    "codeSigning": ExtendedKeyUsageOID.CODE_SIGNING,
    "emailProtection": ExtendedKeyUsageOID.EMAIL_PROTECTION,
    "timeStamping": ExtendedKeyUsageOID.TIME_STAMPING,
}


# ============================================
# 📋 REGISTRY LOOKUP
# ============================================

def extension_set(role: Union[CertRole, str]) -> Tuple[ExtensionDescriptor, ...]:
    """
    Fixed extension set of a role

    Args:
        role: CertRole or its value ("ca", "server", "client")

    Returns:
        tuple: Immutable descriptor sequence
    """
    return EXTENSION_SETS[role_of(role)]


def with_extensions(
        role: Union[CertRole, str],
        extra: Iterable[ExtensionDescriptor]
) -> Tuple[ExtensionDescriptor, ...]:
    """
    Copy of a role's extension set with extra descriptors appended

    Args:
        role: Certificate role
        extra: Descriptors to append (ex: the SAN built by build_san)

    Returns:
        tuple: New descriptor sequence, the base table is untouched
    """
    return extension_set(role) + tuple(extra)


# ============================================
# 🔄 CONVERSION TO CRYPTOGRAPHY OBJECTS
# ============================================

def _basic_constraints(fields) -> x509.BasicConstraints:
    is_ca = bool(fields.get("cA", False))
    path_length = fields.get("pathLenConstraint") if is_ca else None
    return x509.BasicConstraints(ca=is_ca, path_length=path_length)


def _key_usage(fields) -> x509.KeyUsage:
    unknown = set(fields) - set(KEY_USAGE_FLAGS)
    if unknown:
        raise ValidationError(f"Unknown keyUsage flag(s): {', '.join(sorted(unknown))}")

    kwargs = {arg: bool(fields.get(flag, False)) for flag, arg in KEY_USAGE_FLAGS.items()}
    return x509.KeyUsage(**kwargs)


def _ext_key_usage(fields) -> x509.ExtendedKeyUsage:
    usages = []
    for flag, enabled in fields.items():
        if flag not in EXT_KEY_USAGE_OIDS:
            raise ValidationError(f"Unknown extKeyUsage flag: {flag}")
        if enabled:
            usages.append(EXT_KEY_USAGE_OIDS[flag])
    return x509.ExtendedKeyUsage(usages)


def _general_name(entry) -> x509.GeneralName:
    if entry.kind == AltNameKind.URI:
        return x509.UniformResourceIdentifier(entry.value)
    if entry.kind == AltNameKind.IP:
        return x509.IPAddress(ipaddress.ip_address(entry.value))
    raise ValidationError(f"Unsupported alternative name kind: {entry.kind}")


def _subject_alt_name(fields) -> x509.SubjectAlternativeName:
    return x509.SubjectAlternativeName([_general_name(entry) for entry in fields.get("altNames", ())])


EXTENSION_CONVERTERS = {
    "basicConstraints": _basic_constraints,
    "keyUsage": _key_usage,
    "extKeyUsage": _ext_key_usage,
    "subjectAltName": _subject_alt_name,
}


def to_x509_extension(descriptor: ExtensionDescriptor) -> x509.ExtensionType:
    """
    Build the cryptography extension matching a descriptor

    Args:
        descriptor: Extension descriptor

    Returns:
        ExtensionType: Value to pass to CertificateBuilder.add_extension

    Raises:
        ValidationError: If the extension or one of its flags is unknown
    """
    converter = EXTENSION_CONVERTERS.get(descriptor.name)
    if converter is None:
        raise ValidationError(f"Unsupported extension: {descriptor.name}")

    try:
        return converter(descriptor.fields)
    except ValidationError:
        raise
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid {descriptor.name} extension: {exc}") from exc


__all__ = [
    'CA_EXTENSION_SET',
    'SERVER_EXTENSION_SET',
    'CLIENT_EXTENSION_SET',
    'EXTENSION_SETS',
    'extension_set',
    'with_extensions',
    'to_x509_extension'
]
