"""
Utility helpers for azura-ssl
Console output, logging setup, dates and file helpers
"""

import hashlib
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import config

# Rich console used for every user-facing line
console = Console()


# ============================================
# 📊 LOGGING
# ============================================

def setup_logging(level: Optional[str] = None) -> None:
    """
    Route the package loggers through a Rich handler

    Args:
        level: Log level name (defaults to config.LOG_LEVEL)
    """
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=False)
    handler.setFormatter(logging.Formatter(config.LOG_FORMAT, datefmt=config.LOG_DATE_FORMAT))

    package_logger = logging.getLogger("azura_ssl")
    package_logger.handlers[:] = [handler]
    package_logger.setLevel((level or config.LOG_LEVEL).upper())
    package_logger.propagate = False


# ============================================
# 📅 DATES
# ============================================

def now_utc() -> datetime:
    """
    Current UTC time truncated to whole seconds

    X.509 validity is encoded with second precision, truncating here keeps
    the in-memory template equal to the encoded certificate.
    """
    return datetime.now(timezone.utc).replace(microsecond=0)


def add_years(moment: datetime, years: int) -> datetime:
    """
    Shift a datetime by whole calendar years

    Feb 29 maps to Feb 28 when the target year is not a leap year.

    Args:
        moment: Anchor date
        years: Number of years to add

    Returns:
        datetime: Same month/day/time, `years` later
    """
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, day=28)


def format_datetime(dt: datetime, fmt: str = "%Y-%m-%d %H:%M:%S UTC") -> str:
    return dt.strftime(fmt)


# ============================================
# 🔐 CERTIFICATE HELPERS
# ============================================

def calculate_fingerprint(cert: x509.Certificate) -> str:
    """
    SHA-256 fingerprint of a certificate

    Returns:
        str: Colon separated hex string (ex: "A1:B2:C3:...")
    """
    digest = hashlib.sha256(cert.public_bytes(serialization.Encoding.DER)).hexdigest().upper()
    return ':'.join(digest[i:i + 2] for i in range(0, len(digest), 2))


# ============================================
# 📁 FILES
# ============================================

def ensure_directory(path: Path) -> None:
    """Create a directory and its parents when missing"""
    path.mkdir(parents=True, exist_ok=True)


def set_file_permissions(filepath: Path, permissions: int) -> None:
    """
    Apply Unix permissions to a file (no-op on Windows)

    Args:
        filepath: File to update
        permissions: Octal mode (ex: 0o600 for rw-------)
    """
    if os.name != 'nt':
        os.chmod(filepath, permissions)


def format_bytes(bytes_count: float) -> str:
    """Human readable size (ex: "1.50 KB")"""
    for unit in ['B', 'KB', 'MB']:
        if bytes_count < 1024.0:
            return f"{bytes_count:.2f} {unit}"
        bytes_count /= 1024.0
    return f"{bytes_count:.2f} GB"


def get_file_info(filepath: Path) -> Dict[str, Any]:
    """Size and permissions of a file, empty dict when it does not exist"""
    if not filepath.exists():
        return {}

    stat = filepath.stat()
    return {
        "size": format_bytes(stat.st_size),
        "size_bytes": stat.st_size,
        "permissions": oct(stat.st_mode)[-3:]
    }


# ============================================
# 🎨 CLI OUTPUT WITH RICH
# ============================================

def print_success(message: str) -> None:
    """Green message with success symbol"""
    console.print(f"[{config.CLI_COLORS['success']}]{config.CLI_SYMBOLS['success']} {escape(message)}[/]")


def print_error(message: str) -> None:
    """Red message with error symbol"""
    console.print(f"[{config.CLI_COLORS['error']}]{config.CLI_SYMBOLS['error']} {escape(message)}[/]")


def print_warning(message: str) -> None:
    """Yellow message with warning symbol"""
    console.print(f"[{config.CLI_COLORS['warning']}]{config.CLI_SYMBOLS['warning']} {escape(message)}[/]")


def print_info(message: str) -> None:
    """Cyan message with info symbol"""
    console.print(f"[{config.CLI_COLORS['info']}]{config.CLI_SYMBOLS['info']} {escape(message)}[/]")


def print_header(title: str) -> None:
    """
    Framed title

    Args:
        title: Text to display
    """
    console.print()
    console.print(Panel.fit(
        f"[bold magenta]{title}[/bold magenta]",
        border_style="magenta",
        box=box.DOUBLE
    ))
    console.print()


def create_table(title: str, columns: list) -> Table:
    """
    Styled Rich table ready to be filled

    Args:
        title: Table title
        columns: Column names

    Returns:
        Table: Rich table
    """
    table = Table(
        title=title,
        title_style="bold cyan",
        border_style="blue",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    for col in columns:
        table.add_column(col)

    return table


def display_cert_info(cert: x509.Certificate) -> None:
    """
    Print the main fields of an X.509 certificate as a table

    Args:
        cert: Certificate to display
    """
    table = create_table(f"{config.CLI_SYMBOLS['cert']} Certificate", ["Field", "Value"])

    table.add_row("Subject", f"[cyan]{cert.subject.rfc4514_string()}[/cyan]")
    table.add_row("Issuer", f"[yellow]{cert.issuer.rfc4514_string()}[/yellow]")
    table.add_row("Serial", f"[green]{cert.serial_number:02X}[/green]")
    table.add_row("Valid from", format_datetime(cert.not_valid_before_utc))
    table.add_row("Valid until", format_datetime(cert.not_valid_after_utc))

    try:
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
        names = [str(entry.value) for entry in san]
        table.add_row("Alt names", ", ".join(names))
    except x509.ExtensionNotFound:
        pass

    table.add_row("SHA-256", f"[dim]{calculate_fingerprint(cert)}[/dim]")

    console.print(table)


__all__ = [
    'console',
    'setup_logging',
    'now_utc', 'add_years', 'format_datetime',
    'calculate_fingerprint',
    'ensure_directory', 'set_file_permissions', 'format_bytes', 'get_file_info',
    'print_success', 'print_error', 'print_warning', 'print_info', 'print_header',
    'create_table', 'display_cert_info'
]
