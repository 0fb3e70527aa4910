"""
RSA key pair generation
"""

import logging

from cryptography.hazmat.primitives.asymmetric import rsa
from tqdm import tqdm

from . import config
from .errors import ValidationError
from .models import KeyPair

logger = logging.getLogger(__name__)


class KeyGenerator:
    """
    Generates the RSA key pair of each certificate
    """

    def __init__(self, min_key_size: int = config.MIN_KEY_SIZE, show_progress: bool = False):
        """
        Args:
            min_key_size: Smallest modulus accepted, in bits
            show_progress: Display a progress bar while generating
        """
        self.min_key_size = min_key_size
        self.show_progress = show_progress

    def validate_key_size(self, key_size: int) -> None:
        """
        Reject key sizes below the safe floor

        Raises:
            ValidationError: If key_size is not an int >= min_key_size
        """
        if isinstance(key_size, bool) or not isinstance(key_size, int):
            raise ValidationError(f"RSA key size must be an integer, got {key_size!r}")

        if key_size < self.min_key_size:
            raise ValidationError(
                f"RSA key size {key_size} is below the minimum of {self.min_key_size} bits"
            )

    def generate_rsa_key(self, key_size: int = config.DEFAULT_KEY_SIZE) -> KeyPair:
        """
        Generate a fresh RSA key pair

        Args:
            key_size: Modulus size in bits

        Returns:
            KeyPair: Private and public halves

        Raises:
            ValidationError: If the key size is unsafe
        """
        self.validate_key_size(key_size)
        logger.info("Generating RSA %d bits key", key_size)

        with tqdm(total=1, desc=f"RSA {key_size}", disable=not self.show_progress,
                  bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt}") as pbar:
            private_key = rsa.generate_private_key(
                public_exponent=config.RSA_PUBLIC_EXPONENT,
                key_size=key_size
            )
            pbar.update(1)

        return KeyPair(private_key=private_key, public_key=private_key.public_key())


__all__ = ['KeyGenerator']
