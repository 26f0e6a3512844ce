"""
File helpers shared by the state store and the report exporter.
"""

from __future__ import annotations

import os


def default_file_mode() -> int:
    """Permission bits a plain ``open(path, "w")`` would give a new file.

    ``tempfile.mkstemp`` creates files as 0600; writers that rename a temp
    file into place chmod it to this mode first.
    """
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask
