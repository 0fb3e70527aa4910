"""
Exception hierarchy of the certificate engine
"""


class AzuraSSLError(Exception):
    """Base class of every error raised by azura_ssl"""


class ParseError(AzuraSSLError, ValueError):
    """Malformed input text (distinguished name segment, PEM payload)"""


class ValidationError(AzuraSSLError, ValueError):
    """Rejected parameter (SAN token, key size, TTL, subject type)"""


class NotFound(AzuraSSLError, FileNotFoundError):
    """A CA key or certificate path does not exist"""


class DecryptionError(AzuraSSLError):
    """A private key could not be decrypted with the given passphrase"""


class SignatureMismatch(AzuraSSLError):
    """A signing key does not belong to the certificate it is used with"""


class ArchiveError(AzuraSSLError):
    """PKCS#12 packaging was given incomplete inputs"""


class PromptAborted(AzuraSSLError):
    """An interactive prompt ran out of attempts"""


__all__ = [
    'AzuraSSLError',
    'ParseError',
    'ValidationError',
    'NotFound',
    'DecryptionError',
    'SignatureMismatch',
    'ArchiveError',
    'PromptAborted'
]
