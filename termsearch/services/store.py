"""
Catalog Store - Load and save the engine catalog as a TOML file.

Example catalog file:
    default_engine = "ddg"

    [[engines]]
    id = "0b7c3f0e-7a43-4b0c-9a8f-2f6ad1c1d5b2"
    name = "ddg"
    url_pattern = "https://duckduckgo.com/?q={q}"
    pattern = "{q}"
    regex = "\\s+"
    replacement = "+"

A missing or empty file is a valid starting point (no engines yet).
Saving always rewrites the whole file through a temp file and rename,
so a crash mid-write never leaves a truncated catalog behind.
"""

import os
import stat
import tempfile
import tomllib
from pathlib import Path

import tomli_w
from loguru import logger

from termsearch.errors import MalformedConfig, StorageError
from termsearch.services.catalog import Catalog


def load(path: Path) -> Catalog:
    """
    Load the catalog bound to a file, creating the file if needed.

    Args:
        path: Catalog file location

    Returns:
        Catalog bound to path

    Raises:
        StorageError: If the file cannot be created or read
        MalformedConfig: If the file content is not a valid catalog
    """
    path = Path(path)
    logger.info(f"Loading catalog from {path}")

    if not path.exists():
        logger.info("Catalog file does not exist, creating it")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
        except OSError as e:
            logger.error(f"Error creating catalog file {path}: {e}")
            raise StorageError(f"Unable to create {path}: {e}") from e
        return Catalog(path=path)

    try:
        size = path.stat().st_size
    except OSError:
        size = 0

    if size == 0:
        logger.info("Catalog file is empty")
        return Catalog(path=path)

    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        logger.error(f"Failed to parse catalog {path}: {e}")
        raise MalformedConfig(f"Unable to parse {path}: {e}") from e
    except OSError as e:
        logger.error(f"Failed to open catalog {path}: {e}")
        raise StorageError(f"Unable to read {path}: {e}") from e

    catalog = Catalog.from_dict(data, path=path)
    logger.info(f"Catalog loaded with {len(catalog.engines)} engine(s)")
    return catalog


def save(catalog: Catalog) -> None:
    """
    Write the whole catalog to its bound file.

    The content goes to a temp file next to the real file (symlinks are
    followed), takes over the existing file mode, is flushed to disk and
    is then renamed over the target.

    Raises:
        StorageError: If the catalog has no bound path or writing fails
    """
    if catalog.path is None:
        raise StorageError("Catalog is not bound to a file")

    path = Path(catalog.path).resolve()
    logger.info(f"Saving catalog to {path}")
    try:
        content = tomli_w.dumps(catalog.to_dict())
    except (TypeError, ValueError) as e:
        logger.error(f"Unable to encode catalog: {e}")
        raise StorageError(f"Unable to encode catalog for {path}: {e}") from e

    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            if path.exists():
                os.fchmod(f.fileno(), stat.S_IMODE(path.stat().st_mode))
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        logger.error(f"Error saving catalog {path}: {e}")
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise StorageError(f"Unable to save {path}: {e}") from e

    logger.info("Catalog saved successfully")
