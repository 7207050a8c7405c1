# utils.py
from __future__ import annotations

import os

BINARY_SNIFF_SIZE = 4096


def is_binary_file(path: str, sample_size: int = BINARY_SNIFF_SIZE) -> bool:
    """
    Null-byte heuristic: a file is binary if its first `sample_size`
    bytes contain a NUL. Read errors propagate to the caller.
    """
    with open(path, "rb") as fh:
        chunk = fh.read(sample_size)
    return b"\x00" in chunk


def join_relative(rel_dir: str, name: str) -> str:
    """Join a posix relative directory ("" for the root) and an entry name."""
    return f"{rel_dir}/{name}" if rel_dir else name


def format_execution_time(milliseconds: float) -> str:
    """'<n> ms' below one second, '<x.xx> seconds' from there on."""
    if milliseconds < 1000:
        return f"{int(milliseconds)} ms"
    return f"{milliseconds / 1000:.2f} seconds"


def root_name(dir_path: str) -> str:
    name = os.path.basename(os.path.abspath(dir_path))
    # basename of "/" is ''
    return name or dir_path
