# tests/test_certificate_builder.py

import dataclasses
from datetime import datetime, timezone

import pytest

from azura_ssl import utils
from azura_ssl.errors import ValidationError
from azura_ssl.extensions import extension_set
from azura_ssl.keygen import KeyGenerator
from azura_ssl.models import CertRole, SubjectAttribute, UnsignedCertificate


@pytest.fixture(scope="module")
def template(builder):
    return builder.build(
        ttl_years=3,
        subject=[SubjectAttribute("CN", "server"), SubjectAttribute("O", "aaa")],
        extensions=extension_set(CertRole.SERVER),
        serial="02",
        key_bits=2048
    )


def test_returns_key_and_unsigned_template(template):
    private_key, unsigned = template

    assert isinstance(unsigned, UnsignedCertificate)
    assert private_key.key_size == 2048
    assert private_key.public_key().public_numbers() == unsigned.public_key.public_numbers()


def test_subject_and_extensions_attached_verbatim(template):
    _, unsigned = template

    assert unsigned.subject == (SubjectAttribute("CN", "server"), SubjectAttribute("O", "aaa"))
    assert unsigned.extensions == extension_set(CertRole.SERVER)


def test_serial_parsed_from_hex(template):
    _, unsigned = template
    assert unsigned.serial_number == 2


def test_validity_is_calendar_years(template):
    _, unsigned = template

    assert unsigned.not_after.year - unsigned.not_before.year == 3
    assert unsigned.not_after.month == unsigned.not_before.month
    assert unsigned.not_after.day == unsigned.not_before.day
    assert unsigned.not_after.time() == unsigned.not_before.time()
    assert unsigned.not_before.tzinfo is not None


def test_template_is_immutable(template):
    _, unsigned = template
    with pytest.raises(dataclasses.FrozenInstanceError):
        unsigned.serial_number = 5


def test_key_size_floor(builder):
    with pytest.raises(ValidationError):
        builder.build(ttl_years=1, subject=[], extensions=(), serial="01", key_bits=1024)


def test_non_positive_ttl(builder):
    with pytest.raises(ValidationError):
        builder.build(ttl_years=0, subject=[], extensions=(), serial="01")


def test_invalid_serial(builder):
    with pytest.raises(ValidationError):
        builder.build(ttl_years=1, subject=[], extensions=(), serial="zz")


def test_key_generator_rejects_non_int():
    with pytest.raises(ValidationError):
        KeyGenerator().generate_rsa_key("2048")


def test_add_years_on_leap_day():
    leap_day = datetime(2024, 2, 29, 12, 0, tzinfo=timezone.utc)

    assert utils.add_years(leap_day, 1) == datetime(2025, 2, 28, 12, 0, tzinfo=timezone.utc)
    assert utils.add_years(leap_day, 4) == datetime(2028, 2, 29, 12, 0, tzinfo=timezone.utc)


def test_now_utc_has_second_precision():
    assert utils.now_utc().microsecond == 0
