"""
Global configuration for azura-ssl
Holds every constant and tunable used by the certificate engine and the CLI
"""

import os

# ============================================
# 🔐 CRYPTOGRAPHIC PARAMETERS
# ============================================

# RSA key sizes
DEFAULT_KEY_SIZE = int(os.environ.get("AZURA_SSL_KEY_SIZE", 2048))
MIN_KEY_SIZE = 2048

# Standard RSA public exponent
RSA_PUBLIC_EXPONENT = 65537

# Digest used for every certificate signature
DEFAULT_HASH_ALGORITHM = "SHA256"

# Legacy PEM encryption of private keys (OpenSSL "DEK-Info" header)
KEY_ENCRYPTION_CIPHER = "DES-EDE3-CBC"

# PKCS#12 archive protection
PKCS12_KDF_ROUNDS = 50000

# ============================================
# 📜 CERTIFICATE ROLES
# ============================================

# Serial numbers (hex) and validity in years, per certificate role
ROLE_DEFAULTS = {
    "ca": {"serial": "01", "ttl_years": 2},
    "server": {"serial": "02", "ttl_years": 3},
    "client": {"serial": "03", "ttl_years": 3},
}

# Default base filename of the CA artefacts
DEFAULT_CA_FILENAME = "ca"

# File suffixes of the produced artefacts
KEY_SUFFIX = ".key"
CERT_SUFFIX = ".crt"
PKCS12_SUFFIX = ".p12"

# ============================================
# 🌐 SUBJECT ALTERNATIVE NAMES
# ============================================

DEFAULT_SAN_URIS = "localhost"
DEFAULT_SAN_IPS = "127.0.0.1"

# ============================================
# 💬 INTERACTIVE PROMPTS
# ============================================

# Upper bound on re-prompts (passphrase mismatch, missing CA files)
MAX_PROMPT_ATTEMPTS = int(os.environ.get("AZURA_SSL_MAX_PROMPT_ATTEMPTS", 3))

# Questions asked when no subject string is supplied
SUBJECT_QUESTIONS = [
    ("countryName", "Country [C]"),
    ("organizationName", "Organization [O]"),
    ("organizationalUnitName", "Organization Unit [OU]"),
    ("commonName", "Common Name [CN]"),
]

# ============================================
# 🎨 CLI DISPLAY SETTINGS
# ============================================

CLI_COLORS = {
    "success": "green",
    "error": "red",
    "warning": "yellow",
    "info": "cyan",
    "header": "magenta bold",
    "cert": "blue",
    "key": "yellow"
}

CLI_SYMBOLS = {
    "success": "✓",
    "error": "✗",
    "warning": "⚠",
    "info": "ℹ",
    "cert": "📜",
    "key": "🔑",
    "archive": "📦",
    "ca": "👑",
    "client": "👤",
    "server": "🖥️"
}

# ============================================
# 📊 LOGGING
# ============================================

LOG_LEVEL = os.environ.get("AZURA_SSL_LOG_LEVEL", "WARNING")
LOG_FORMAT = "%(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# ============================================
# 🔒 SECURITY
# ============================================

# Unix file permissions
PRIVATE_KEY_PERMISSIONS = 0o600  # rw-------
CERT_PERMISSIONS = 0o644  # rw-r--r--


def get_role_defaults(role: str) -> dict:
    """
    Return the default serial and validity of a certificate role

    Args:
        role: Role name ("ca", "server" or "client")

    Returns:
        dict: {"serial": str, "ttl_years": int}
    """
    return dict(ROLE_DEFAULTS[role])


__all__ = [
    # Crypto
    'DEFAULT_KEY_SIZE', 'MIN_KEY_SIZE', 'RSA_PUBLIC_EXPONENT', 'DEFAULT_HASH_ALGORITHM',
    'KEY_ENCRYPTION_CIPHER', 'PKCS12_KDF_ROUNDS',

    # Roles
    'ROLE_DEFAULTS', 'DEFAULT_CA_FILENAME', 'KEY_SUFFIX', 'CERT_SUFFIX', 'PKCS12_SUFFIX',

    # SAN
    'DEFAULT_SAN_URIS', 'DEFAULT_SAN_IPS',

    # Prompts
    'MAX_PROMPT_ATTEMPTS', 'SUBJECT_QUESTIONS',

    # CLI
    'CLI_COLORS', 'CLI_SYMBOLS',

    # Logs
    'LOG_LEVEL', 'LOG_FORMAT', 'LOG_DATE_FORMAT',

    # Security
    'PRIVATE_KEY_PERMISSIONS', 'CERT_PERMISSIONS',

    'get_role_defaults'
]
