"""
Data models of the certificate engine
Immutable values passed between the parser, the builder and the signer
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple, Union

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID, ObjectIdentifier

from .errors import ValidationError

PrivateKeyTypes = rsa.RSAPrivateKey
PublicKeyTypes = rsa.RSAPublicKey


class CertRole(str, Enum):
    """Closed set of certificate roles issued by the tool"""
    CA = "ca"
    SERVER = "server"
    CLIENT = "client"


class AltNameKind(IntEnum):
    """GeneralName tag numbers (RFC 5280) of the supported alternative names"""
    URI = 6
    IP = 7


@dataclass(frozen=True)
class SubjectAttribute:
    """
    One attribute of a distinguished name

    `type` is an OpenSSL short name (CN, O, ...), a long name
    (commonName, organizationName, ...) or a dotted OID.
    """
    type: str
    value: str


@dataclass(frozen=True)
class AltNameEntry:
    """Typed entry of a subjectAltName extension"""
    kind: AltNameKind
    value: str


@dataclass(frozen=True)
class ExtensionDescriptor:
    """
    X.509v3 extension description, independent of any crypto backend

    `fields` holds the extension specific flags (cA, keyCertSign,
    serverAuth, altNames, ...). It is wrapped read-only on creation.
    """
    name: str
    critical: bool = False
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def __hash__(self):
        return hash((self.name, self.critical, tuple(sorted(self.fields.items()))))


@dataclass(frozen=True)
class KeyPair:
    """RSA key pair generated for one certificate"""
    private_key: PrivateKeyTypes
    public_key: PublicKeyTypes


@dataclass(frozen=True)
class UnsignedCertificate:
    """
    Certificate template produced by the builder

    Carries no issuer and no signature; only the signing engine turns it
    into a SignedCertificate.
    """
    public_key: PublicKeyTypes
    serial_number: int
    not_before: datetime
    not_after: datetime
    subject: Tuple[SubjectAttribute, ...]
    extensions: Tuple[ExtensionDescriptor, ...]


@dataclass(frozen=True)
class SignedCertificate:
    """
    Signed certificate: the template, its issuer and the encoded X.509 object
    """
    unsigned: UnsignedCertificate
    issuer: Tuple[SubjectAttribute, ...]
    certificate: x509.Certificate

    @property
    def subject(self) -> Tuple[SubjectAttribute, ...]:
        return self.unsigned.subject

    @property
    def public_key(self) -> PublicKeyTypes:
        return self.unsigned.public_key

    @property
    def serial_number(self) -> int:
        return self.unsigned.serial_number

    @property
    def not_before(self) -> datetime:
        return self.unsigned.not_before

    @property
    def not_after(self) -> datetime:
        return self.unsigned.not_after

    @property
    def extensions(self) -> Tuple[ExtensionDescriptor, ...]:
        return self.unsigned.extensions

    @property
    def signature(self) -> bytes:
        return self.certificate.signature

    @property
    def signature_algorithm(self) -> str:
        """Signature algorithm name, e.g. "sha256WithRSAEncryption" """
        return f"{self.certificate.signature_hash_algorithm.name}WithRSAEncryption"

    def to_pem(self) -> bytes:
        """PEM encoding of the certificate"""
        return self.certificate.public_bytes(serialization.Encoding.PEM)


# ============================================
# 🏷️ DISTINGUISHED NAME ENCODING
# ============================================

# Short and long attribute names understood by OpenSSL style DN strings
NAME_OIDS = {
    "C": NameOID.COUNTRY_NAME,
    "countryName": NameOID.COUNTRY_NAME,
    "ST": NameOID.STATE_OR_PROVINCE_NAME,
    "stateOrProvinceName": NameOID.STATE_OR_PROVINCE_NAME,
    "L": NameOID.LOCALITY_NAME,
    "localityName": NameOID.LOCALITY_NAME,
    "O": NameOID.ORGANIZATION_NAME,
    "organizationName": NameOID.ORGANIZATION_NAME,
    "OU": NameOID.ORGANIZATIONAL_UNIT_NAME,
    "organizationalUnitName": NameOID.ORGANIZATIONAL_UNIT_NAME,
    "CN": NameOID.COMMON_NAME,
    "commonName": NameOID.COMMON_NAME,
    "E": NameOID.EMAIL_ADDRESS,
    "emailAddress": NameOID.EMAIL_ADDRESS,
    "street": NameOID.STREET_ADDRESS,
    "streetAddress": NameOID.STREET_ADDRESS,
    "postalCode": NameOID.POSTAL_CODE,
    "serialNumber": NameOID.SERIAL_NUMBER,
    "DC": NameOID.DOMAIN_COMPONENT,
    "domainComponent": NameOID.DOMAIN_COMPONENT,
    "UID": NameOID.USER_ID,
    "userId": NameOID.USER_ID,
    "title": NameOID.TITLE,
    "GN": NameOID.GIVEN_NAME,
    "givenName": NameOID.GIVEN_NAME,
    "SN": NameOID.SURNAME,
    "surname": NameOID.SURNAME,
}

# Reverse lookup, short names win
OID_SHORT_NAMES = {}
for _name, _oid in NAME_OIDS.items():
    OID_SHORT_NAMES.setdefault(_oid, _name)


def resolve_name_oid(attr_type: str) -> ObjectIdentifier:
    """
    Map a subject attribute type to its OID

    Args:
        attr_type: Short name, long name or dotted OID

    Returns:
        ObjectIdentifier: Matching OID

    Raises:
        ValidationError: If the type is unknown or not a valid OID
    """
    if attr_type in NAME_OIDS:
        return NAME_OIDS[attr_type]

    if attr_type and all(part.isdigit() for part in attr_type.split(".")):
        try:
            return ObjectIdentifier(attr_type)
        except ValueError as exc:
            raise ValidationError(f"Invalid subject attribute OID: {attr_type}") from exc

    raise ValidationError(f"Unknown subject attribute type: {attr_type}")


def to_x509_name(attributes) -> x509.Name:
    """
    Encode an ordered attribute sequence as an X.509 Name

    Each attribute becomes its own RDN, left to right.

    Raises:
        ValidationError: Unknown type or value rejected by the encoder
    """
    name_attributes = []
    for attribute in attributes:
        oid = resolve_name_oid(attribute.type)
        try:
            name_attributes.append(x509.NameAttribute(oid, attribute.value))
        except ValueError as exc:
            raise ValidationError(f"Invalid value for {attribute.type}: {exc}") from exc

    return x509.Name(name_attributes)


def attributes_from_name(name: x509.Name) -> Tuple[SubjectAttribute, ...]:
    """Decode an X.509 Name into SubjectAttribute values, in encoding order"""
    return tuple(
        SubjectAttribute(
            type=OID_SHORT_NAMES.get(attribute.oid, attribute.oid.dotted_string),
            value=attribute.value if isinstance(attribute.value, str) else attribute.value.hex()
        )
        for attribute in name
    )


def parse_serial(serial: Union[str, int, None]) -> int:
    """
    Normalise a serial number given as hex string ("01") or integer

    Raises:
        ValidationError: If the serial is not a positive number
    """
    if isinstance(serial, int):
        value = serial
    elif isinstance(serial, str):
        try:
            value = int(serial, 16)
        except ValueError as exc:
            raise ValidationError(f"Serial number must be hexadecimal: {serial!r}") from exc
    else:
        raise ValidationError(f"Unsupported serial number: {serial!r}")

    if value <= 0:
        raise ValidationError("Serial number must be positive")

    return value


def role_of(value: Optional[Union[str, CertRole]]) -> CertRole:
    """Coerce a role name into CertRole"""
    try:
        return CertRole(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown certificate role: {value!r}") from exc


__all__ = [
    'PrivateKeyTypes',
    'PublicKeyTypes',
    'CertRole',
    'AltNameKind',
    'SubjectAttribute',
    'AltNameEntry',
    'ExtensionDescriptor',
    'KeyPair',
    'UnsignedCertificate',
    'SignedCertificate',
    'NAME_OIDS',
    'resolve_name_oid',
    'to_x509_name',
    'attributes_from_name',
    'parse_serial',
    'role_of'
]
