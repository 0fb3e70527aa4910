# tests/test_cli.py

import pytest
from cryptography import x509
from cryptography.hazmat.primitives.serialization import pkcs12

from azura_ssl import config
from azura_ssl.cli import build_parser, main
from azura_ssl.codec import KeyEncryptionCodec, certificate_from_pem
from azura_ssl.issuer import artifact_base


@pytest.fixture(scope="module")
def chain_dir(tmp_path_factory):
    """Output directory holding a CA created through the CLI"""
    out = tmp_path_factory.mktemp("chain")
    status = main(["--out-dir", str(out), "sign-ca", "--passphrase", "secret", "-s", "/C=US/O=Azura/CN=Test CA"])
    assert status == 0
    return out


def ca_options(out):
    return ["--ca", str(out / "ca.crt"), "--cakey", str(out / "ca.key"), "--cakey-passphrase", "secret"]


def test_artifact_base_strips_extension(tmp_path):
    assert artifact_base("server.crt", tmp_path) == tmp_path / "server"
    assert artifact_base("client", tmp_path) == tmp_path / "client"
    assert artifact_base(str(tmp_path / "abs.pem"), "/elsewhere") == tmp_path / "abs"


def test_parser_defaults():
    args = build_parser().parse_args(["sign-ca"])
    assert args.filename == "ca"
    assert args.bits == config.DEFAULT_KEY_SIZE


def test_sign_ca_writes_encrypted_key(chain_dir):
    key_pem = (chain_dir / "ca.key").read_bytes()
    cert = certificate_from_pem((chain_dir / "ca.crt").read_bytes())

    assert b"DEK-Info: DES-EDE3-CBC" in key_pem
    assert cert.issuer == cert.subject
    assert cert.subject.rfc4514_string() == "CN=Test CA,O=Azura,C=US"
    assert cert.serial_number == 1
    assert cert.not_valid_after_utc.year - cert.not_valid_before_utc.year == 2

    key = KeyEncryptionCodec().decode(key_pem, "secret")
    assert key.public_key().public_numbers() == cert.public_key().public_numbers()


def test_sign_server_with_san(chain_dir):
    status = main(["--out-dir", str(chain_dir), "sign-server", "server.crt", "-s", "/CN=localhost",
                   "--uris", "localhost", "--ips", "127.0.0.1"] + ca_options(chain_dir))
    assert status == 0

    ca_cert = certificate_from_pem((chain_dir / "ca.crt").read_bytes())
    cert = certificate_from_pem((chain_dir / "server.crt").read_bytes())

    assert cert.issuer == ca_cert.subject
    assert cert.serial_number == 2
    cert.verify_directly_issued_by(ca_cert)

    san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    assert san.get_values_for_type(x509.UniformResourceIdentifier) == ["localhost"]
    assert [str(ip) for ip in san.get_values_for_type(x509.IPAddress)] == ["127.0.0.1"]

    # server keys are written without encryption
    assert b"ENCRYPTED" not in (chain_dir / "server.key").read_bytes()


def test_sign_server_interactive_san(chain_dir, answers):
    answers("a.com, b.com", "10.0.0.6")
    status = main(["--out-dir", str(chain_dir), "sign-server", "web", "-s", "/CN=web", "--san"]
                  + ca_options(chain_dir))
    assert status == 0

    cert = certificate_from_pem((chain_dir / "web.crt").read_bytes())
    san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    assert san.get_values_for_type(x509.UniformResourceIdentifier) == ["a.com", "b.com"]


def test_sign_server_without_san(chain_dir):
    status = main(["--out-dir", str(chain_dir), "sign-server", "plain", "-s", "/CN=plain"]
                  + ca_options(chain_dir))
    assert status == 0

    cert = certificate_from_pem((chain_dir / "plain.crt").read_bytes())
    with pytest.raises(x509.ExtensionNotFound):
        cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)


def test_sign_client_writes_archive(chain_dir):
    status = main(["--out-dir", str(chain_dir), "sign-client", "client", "-s", "/CN=client",
                   "--name", "Jane Doe", "--passphrase", "export"] + ca_options(chain_dir))
    assert status == 0

    archive = pkcs12.load_pkcs12((chain_dir / "client.p12").read_bytes(), b"export")
    ca_cert = certificate_from_pem((chain_dir / "ca.crt").read_bytes())

    assert archive.cert.friendly_name == b"Jane Doe"
    assert archive.cert.certificate.serial_number == 3
    assert archive.cert.certificate.issuer == ca_cert.subject
    assert [c.certificate for c in archive.additional_certs] == [ca_cert]


def test_malformed_subject_fails(tmp_path):
    assert main(["--out-dir", str(tmp_path), "sign-ca", "--passphrase", "", "-s", "/Cus"]) == 1
    assert not (tmp_path / "ca.crt").exists()


def test_small_key_rejected(tmp_path):
    assert main(["--out-dir", str(tmp_path), "sign-ca", "--passphrase", "", "-s", "/CN=x", "-b", "1024"]) == 1


def test_missing_ca_files(tmp_path, answers):
    answers(str(tmp_path / "a.key"), "", str(tmp_path / "b.key"), "")
    status = main(["--out-dir", str(tmp_path), "sign-server", "server", "-s", "/CN=x",
                   "--cakey", str(tmp_path / "none.key"), "--cakey-passphrase", ""])
    assert status == 1


def test_mismatched_ca_pair(chain_dir, tmp_path):
    assert main(["--out-dir", str(tmp_path), "sign-ca", "--passphrase", "", "-s", "/CN=Other"]) == 0

    status = main(["--out-dir", str(tmp_path), "sign-server", "server", "-s", "/CN=x",
                   "--ca", str(chain_dir / "ca.crt"), "--cakey", str(tmp_path / "ca.key"),
                   "--cakey-passphrase", ""])
    assert status == 1
    assert not (tmp_path / "server.crt").exists()


def test_subject_without_leading_slash_fails(tmp_path):
    assert main(["--out-dir", str(tmp_path), "sign-ca", "--passphrase", "", "-s", "CN=host"]) == 1
    assert not (tmp_path / "ca.crt").exists()


def test_invalid_oid_subject_fails(tmp_path):
    assert main(["--out-dir", str(tmp_path), "sign-ca", "--passphrase", "", "-s", "/1=x"]) == 1
