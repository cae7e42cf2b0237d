"""Deterministic, content-independent paths for module ids."""

from __future__ import annotations

import hashlib
import os
import re
from urllib.parse import urlparse
from urllib.request import url2pathname

from bundlekit.types import FileMap

_URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
_FILE_URL_PATTERN = re.compile(r"^file://", re.IGNORECASE)


def is_url(input: str) -> bool:
    """Remote (http/https) module id"""
    return bool(_URL_PATTERN.match(input))


def is_file_url(input: str) -> bool:
    return bool(_FILE_URL_PATTERN.match(input))


def local_path(input: str) -> str:
    """Filesystem path of a local module id (``file://`` URLs included)"""
    if is_file_url(input):
        return url2pathname(urlparse(input).path)
    return input


def hash_id(input: str) -> str:
    """sha256 hex digest of a module id"""
    return hashlib.sha256(input.encode("utf-8")).hexdigest()


def get_output(input: str, file_map: FileMap, base: str, extension: str = ".js") -> str:
    """
    Output path of a module's bundle.

    Memoized in ``file_map``: an existing mapping (for example one carried over
    from a previous run) always wins over the computed path.
    """
    if not file_map.get(input):
        file_map[input] = os.path.join(base, hash_id(input)) + extension
    return file_map[input]


def get_cache_output(input: str, cache_dir: str) -> str:
    """Path of a module's transformed-source cache file"""
    return os.path.join(cache_dir, hash_id(input))
