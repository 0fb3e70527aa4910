"""
File I/O for produced artefacts (keys, certificates, archives)
"""

import logging
from pathlib import Path
from typing import Optional, Union

from . import utils
from .errors import NotFound

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def persist(data: bytes, path: PathLike, permissions: Optional[int] = None) -> Path:
    """
    Write bytes to a file, creating parent directories as needed

    Args:
        data: Content to write
        path: Destination file
        permissions: Unix mode applied after writing (ex: 0o600)

    Returns:
        Path: Written file
    """
    path = Path(path)
    utils.ensure_directory(path.parent)
    path.write_bytes(data)

    if permissions is not None:
        utils.set_file_permissions(path, permissions)

    logger.info("Wrote %s (%s)", path, utils.get_file_info(path).get("size", "N/A"))
    return path


def read_bytes(path: PathLike, label: str = "file") -> bytes:
    """
    Read a file that must exist

    Args:
        path: File to read
        label: Human name of the artefact, used in the error message

    Raises:
        NotFound: If the path does not exist
    """
    path = Path(path)
    if not path.is_file():
        raise NotFound(f"Can not locate the {label}: {path}")
    return path.read_bytes()


__all__ = ['persist', 'read_bytes']
