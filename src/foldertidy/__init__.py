"""foldertidy: sort a directory's files into label-named subfolders."""

from __future__ import annotations

__version__ = "0.1.0"
