"""Reading and atomically writing document files."""

import logging
import os
import tempfile

from .constants import EditorConstants

logger = logging.getLogger(__name__)


def read_document(path: str) -> bytes:
    """Return the raw bytes of a document.

    Raises:
        FileNotFoundError: If there is no such file
        OSError: For any other read failure
    """
    with open(path, 'rb') as f:
        data = f.read()
    logger.info(f"Read {len(data)} bytes from {path}")
    return data


def write_document(path: str, data: bytes) -> None:
    """Write bytes to path atomically.

    The data goes to a temporary file in the same directory, which is
    fsynced and then renamed over the target, so a failed save never
    leaves a truncated document behind.

    Raises:
        OSError: If the write or the rename fails; the temporary file is
            removed first
    """
    dir_name = os.path.dirname(os.path.abspath(path))
    base = os.path.basename(path)
    temp_filename = None
    try:
        with tempfile.NamedTemporaryFile(mode='wb', dir=dir_name,
                                         prefix=EditorConstants.ATOMIC_SAVE_PREFIX + base,
                                         suffix=EditorConstants.ATOMIC_SAVE_SUFFIX,
                                         delete=False) as temp_file:
            temp_filename = temp_file.name
            temp_file.write(data)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        if os.path.exists(path):
            # Keep the permissions of the file being replaced
            os.chmod(temp_filename, os.stat(path).st_mode & 0o7777)
        os.replace(temp_filename, path)
    except OSError:
        if temp_filename is not None and os.path.exists(temp_filename):
            try:
                os.remove(temp_filename)
            except OSError as e:
                logger.warning(f"Could not remove temporary file {temp_filename}: {e}")
        raise
    logger.info(f"Wrote {len(data)} bytes to {path}")
