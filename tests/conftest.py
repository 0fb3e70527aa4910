# tests/conftest.py

import pytest

from azura_ssl.certificate_builder import CertificateBuilder
from azura_ssl.codec import KeyEncryptionCodec
from azura_ssl.extensions import extension_set
from azura_ssl.keygen import KeyGenerator
from azura_ssl.models import CertRole, SubjectAttribute
from azura_ssl.signing import SigningEngine


@pytest.fixture(scope="session")
def builder():
    return CertificateBuilder()


@pytest.fixture(scope="session")
def signer():
    return SigningEngine()


@pytest.fixture
def codec():
    return KeyEncryptionCodec()


@pytest.fixture(scope="session")
def key_pair():
    return KeyGenerator().generate_rsa_key(2048)


@pytest.fixture(scope="session")
def ca(builder, signer):
    """Self-signed test CA: (private_key, SignedCertificate)"""
    private_key, unsigned = builder.build(
        ttl_years=2,
        subject=[SubjectAttribute("CN", "Test CA")],
        extensions=extension_set(CertRole.CA),
        serial="01",
        key_bits=2048
    )
    return private_key, signer.self_sign(unsigned, private_key)


@pytest.fixture(scope="session")
def other_ca(builder, signer):
    """Unrelated CA used for negative checks"""
    private_key, unsigned = builder.build(
        ttl_years=2,
        subject=[SubjectAttribute("CN", "Other CA")],
        extensions=extension_set(CertRole.CA),
        serial="01",
        key_bits=2048
    )
    return private_key, signer.self_sign(unsigned, private_key)


@pytest.fixture
def answers(monkeypatch):
    """Script the answers of rich Prompt.ask; returns the list of asked questions"""
    from rich.prompt import Prompt

    asked = []

    def install(*values):
        queue = list(values)

        def fake_ask(prompt="", *args, **kwargs):
            asked.append(str(prompt))
            if not queue:
                raise AssertionError(f"Unexpected prompt: {prompt}")
            return queue.pop(0)

        monkeypatch.setattr(Prompt, "ask", fake_ask)
        return asked

    return install
