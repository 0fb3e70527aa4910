"""
Interactive collaborators
Ask the user for subjects, passphrases, alternative names and CA material
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple

from cryptography import x509
from rich.markup import escape
from rich.prompt import Prompt

from . import config, storage, utils
from .codec import KeyEncryptionCodec, certificate_from_pem
from .errors import DecryptionError, NotFound, ParseError, PromptAborted, ValidationError
from .models import ExtensionDescriptor, PrivateKeyTypes, SubjectAttribute
from .san import build_san

logger = logging.getLogger(__name__)


def _check_attempts(max_attempts: int) -> None:
    if max_attempts < 1:
        raise ValidationError(f"max_attempts must be at least 1, got {max_attempts}")


# ============================================
# 🏷️ SUBJECTS
# ============================================

def ask_subjects(predefined: Optional[Sequence[SubjectAttribute]] = None) -> Tuple[SubjectAttribute, ...]:
    """
    Subjects of the certificate request

    Args:
        predefined: Subjects parsed from a --subj string

    Returns:
        tuple: predefined when non-empty, else the answered questions
    """
    if predefined:
        return tuple(predefined)

    attributes = []
    for name, message in config.SUBJECT_QUESTIONS:
        answer = Prompt.ask(escape(message), default="", show_default=False).strip()
        if answer:
            attributes.append(SubjectAttribute(type=name, value=answer))

    return tuple(attributes)


# ============================================
# 🔑 PASSPHRASE
# ============================================

def ask_passphrase(
        message: str = "Enter a passphrase (leave blank for none)",
        max_attempts: int = config.MAX_PROMPT_ATTEMPTS
) -> str:
    """
    Ask a passphrase twice until both entries match

    Args:
        message: First question
        max_attempts: Number of mismatches tolerated

    Returns:
        str: Confirmed passphrase, "" when the user wants no encryption

    Raises:
        PromptAborted: After max_attempts mismatches
    """
    _check_attempts(max_attempts)
    for _ in range(max_attempts):
        passphrase = Prompt.ask(message, password=True, default="", show_default=False)
        if passphrase == "":
            return passphrase

        confirmation = Prompt.ask("Enter the passphrase again to confirm",
                                  password=True, default="", show_default=False)
        if passphrase == confirmation:
            return passphrase

        utils.print_error("Passphrase not match, please enter again.")

    raise PromptAborted(f"Passphrase not confirmed after {max_attempts} attempts")


# ============================================
# 🌐 ALTERNATIVE NAMES
# ============================================

def ask_san(max_attempts: int = config.MAX_PROMPT_ATTEMPTS) -> Tuple[ExtensionDescriptor, ...]:
    """
    Ask the alternative URIs and IPs of a server certificate

    Returns:
        tuple: One subjectAltName descriptor

    Raises:
        ValidationError: When every attempt produced an invalid list
    """
    _check_attempts(max_attempts)
    error = None
    for _ in range(max_attempts):
        uris = Prompt.ask('Enter a list of alternative URIs (e.g. "a.com, b.com")',
                          default=config.DEFAULT_SAN_URIS)
        ips = Prompt.ask('Enter a list of alternative IPs (e.g. "192.168.2.3, 10.0.0.6")',
                         default=config.DEFAULT_SAN_IPS)
        try:
            return build_san(uris, ips)
        except ValidationError as exc:
            utils.print_error(str(exc))
            error = exc

    raise error


# ============================================
# 👑 CA MATERIAL
# ============================================

def load_ca_private_key(
        key_path: Optional[Path] = None,
        passphrase: Optional[str] = None,
        codec: Optional[KeyEncryptionCodec] = None,
        max_attempts: int = config.MAX_PROMPT_ATTEMPTS
) -> PrivateKeyTypes:
    """
    Load the CA private key, prompting for what was not supplied

    A missing file or a wrong passphrase re-asks both the path and the
    passphrase, up to max_attempts times.

    Args:
        key_path: Path given on the command line
        passphrase: Passphrase, prompted when None
        codec: Key codec
        max_attempts: Number of tries

    Raises:
        NotFound / DecryptionError / ParseError: Last error once attempts are exhausted
    """
    _check_attempts(max_attempts)
    codec = codec or KeyEncryptionCodec()
    error = None

    for _ in range(max_attempts):
        path = key_path or Prompt.ask("Enter the path of CA private key")
        secret = passphrase if passphrase is not None else Prompt.ask(
            "Enter the passphrase used to encrypt the private key",
            password=True, default="", show_default=False
        )

        try:
            private_key = codec.decode(storage.read_bytes(path, "CA private key"), secret)
            logger.info("Loaded CA private key from %s", path)
            return private_key
        except (NotFound, DecryptionError, ParseError) as exc:
            utils.print_error(str(exc))
            error = exc
            key_path = None
            passphrase = None

    raise error


def load_ca_certificate(
        cert_path: Optional[Path] = None,
        max_attempts: int = config.MAX_PROMPT_ATTEMPTS
) -> x509.Certificate:
    """
    Load the CA certificate, prompting for its path when not supplied

    A missing or malformed file re-asks the certificate path.

    Raises:
        NotFound / ParseError: Last error once attempts are exhausted
    """
    _check_attempts(max_attempts)
    error = None

    for _ in range(max_attempts):
        path = cert_path or Prompt.ask("Enter the path of CA certificate")

        try:
            certificate = certificate_from_pem(storage.read_bytes(path, "CA certificate"))
            logger.info("Loaded CA certificate from %s", path)
            return certificate
        except (NotFound, ParseError) as exc:
            utils.print_error(str(exc))
            error = exc
            cert_path = None

    raise error


__all__ = [
    'ask_subjects',
    'ask_passphrase',
    'ask_san',
    'load_ca_private_key',
    'load_ca_certificate'
]
