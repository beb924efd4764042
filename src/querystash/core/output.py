# src/querystash/core/output.py
"""All-or-nothing file output.

A reader of a result file must see either the previous content or the
complete new content, never a truncated write.
"""

import os
import tempfile
from pathlib import Path


def write_text_atomic(path: Path, content: str) -> None:
    """Write UTF-8 text to path atomically, creating parent directories.

    Content is written to a temporary file in the same directory, flushed
    and fsynced, then renamed over the target with os.replace(). On any
    failure the temporary file is removed and the exception propagates;
    the target is left untouched.

    Args:
        path: Destination file
        content: Full text to write

    Raises:
        OSError: If the directory cannot be created or the write fails
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
