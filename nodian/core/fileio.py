# nodian/core/fileio.py
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from loguru import logger


def atomic_write_text(path: Path, text: str, suffix: str = "") -> None:
    """
    Replaces `path` with `text` (UTF-8, newlines untouched).

    The content goes to a hidden sibling temp file first, then os.replace swaps
    it in, so readers never see a half-written file. The original's permission
    bits are kept. A symlink is followed, so its target gets the new content
    and the link stays a link. On any OSError the temp file is removed and the error
    propagates with `path` unchanged.
    """
    target = Path(os.path.realpath(path))
    temp_file_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            mode='w',
            encoding='utf-8',
            newline='',
            dir=target.parent,
            prefix=f".{target.name}_tmp",
            suffix=suffix,
            delete=False # os.replace needs the file after close
        ) as temp_f:
            temp_file_path = Path(temp_f.name)
            temp_f.write(text)
            temp_f.flush()
            os.fsync(temp_f.fileno())
        if target.exists():
            shutil.copymode(target, temp_file_path)
        os.replace(temp_file_path, target)
        temp_file_path = None
    finally:
        if temp_file_path is not None and temp_file_path.exists():
            logger.warning(f"Cleaning up leftover temporary file: {temp_file_path}")
            try: temp_file_path.unlink()
            except OSError as unlink_err: logger.error(f"Failed to remove temporary file {temp_file_path}: {unlink_err}")
