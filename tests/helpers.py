"""Small file helpers shared by the test modules."""

import os


def read(path) -> str:
    """Read a file exactly as stored, without newline translation."""
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def set_mtime(path, timestamp: float) -> None:
    os.utime(path, (timestamp, timestamp))
