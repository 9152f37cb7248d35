"""Object key derivation."""
import os
from pathlib import PurePath
from typing import Optional, Union

# Only the platform's own separators; '\' is a legal filename character on POSIX.
_SEPARATORS = tuple(sep for sep in (os.sep, os.altsep) if sep and sep != "/")


def normalize_separators(path: Union[str, PurePath]) -> str:
    """Join path components with '/'."""
    if isinstance(path, PurePath):
        return "/".join(path.parts)
    value = path
    for sep in _SEPARATORS:
        value = value.replace(sep, "/")
    return value


def derive_key(relative_path: Union[str, PurePath], remote_prefix: Optional[str] = None) -> str:
    """
    Map a path relative to the upload root onto an object key.

    Args:
        relative_path: Path of the file relative to the upload root
        remote_prefix: Optional key prefix; trailing '/' is ignored

    Returns:
        Object key, e.g. ``assets/css/b.css``
    """
    normalized = normalize_separators(relative_path)
    if remote_prefix:
        return f"{remote_prefix.rstrip('/')}/{normalized}"
    return normalized
