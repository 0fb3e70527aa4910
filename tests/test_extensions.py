# tests/test_extensions.py

import pytest
from cryptography import x509
from cryptography.x509.oid import ExtendedKeyUsageOID

from azura_ssl.errors import ValidationError
from azura_ssl.extensions import (
    CA_EXTENSION_SET,
    CLIENT_EXTENSION_SET,
    SERVER_EXTENSION_SET,
    extension_set,
    to_x509_extension,
    with_extensions,
)
from azura_ssl.models import CertRole, ExtensionDescriptor
from azura_ssl.san import build_san


def test_lookup_by_role_and_value():
    assert extension_set(CertRole.CA) is CA_EXTENSION_SET
    assert extension_set("server") is SERVER_EXTENSION_SET
    assert extension_set("client") == CLIENT_EXTENSION_SET


def test_unknown_role():
    with pytest.raises(ValidationError):
        extension_set("intermediate")


def test_ca_set_content():
    names = [d.name for d in CA_EXTENSION_SET]
    assert names == ["basicConstraints", "keyUsage"]
    assert CA_EXTENSION_SET[0].fields["cA"] is True
    assert CA_EXTENSION_SET[1].fields["keyCertSign"] is True
    assert CA_EXTENSION_SET[1].fields["cRLSign"] is True
    assert all(d.critical for d in CA_EXTENSION_SET)


def test_server_and_client_sets():
    names = [d.name for d in SERVER_EXTENSION_SET]
    assert names == ["basicConstraints", "keyUsage", "extKeyUsage"]
    assert SERVER_EXTENSION_SET[0].fields["cA"] is False
    assert SERVER_EXTENSION_SET[2].fields == {"serverAuth": True, "clientAuth": True}
    assert "subjectAltName" not in [d.name for d in CLIENT_EXTENSION_SET]


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        CA_EXTENSION_SET[0].fields["cA"] = False

    with pytest.raises(AttributeError):
        CA_EXTENSION_SET.append(None)


def test_with_extensions_copies():
    san = build_san("localhost", "")
    extended = with_extensions(CertRole.SERVER, san)

    assert len(extended) == len(SERVER_EXTENSION_SET) + 1
    assert extended[-1].name == "subjectAltName"
    assert len(SERVER_EXTENSION_SET) == 3


def test_convert_basic_constraints():
    ext = to_x509_extension(CA_EXTENSION_SET[0])
    assert isinstance(ext, x509.BasicConstraints)
    assert ext.ca is True


def test_convert_key_usage():
    ext = to_x509_extension(SERVER_EXTENSION_SET[1])
    assert ext.digital_signature and ext.key_encipherment
    assert not ext.key_cert_sign


def test_convert_ext_key_usage():
    ext = to_x509_extension(SERVER_EXTENSION_SET[2])
    assert list(ext) == [ExtendedKeyUsageOID.SERVER_AUTH, ExtendedKeyUsageOID.CLIENT_AUTH]


def test_unknown_extension_rejected():
    with pytest.raises(ValidationError):
        to_x509_extension(ExtensionDescriptor(name="nsComment", fields={"comment": "x"}))


def test_unknown_key_usage_flag_rejected():
    with pytest.raises(ValidationError):
        to_x509_extension(ExtensionDescriptor(name="keyUsage", fields={"fly": True}))


def test_descriptors_are_hashable():
    san = build_san("localhost", "127.0.0.1")[0]
    same = build_san("localhost", "127.0.0.1")[0]

    assert hash(san) == hash(same)
    assert len({san, same, *SERVER_EXTENSION_SET}) == 4
