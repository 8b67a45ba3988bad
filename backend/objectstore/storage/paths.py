"""
Path helpers for s3:// (canonical) and s3a:// (alternate) object paths.

Pure string functions, no network calls.
"""
import posixpath
from typing import Tuple

from objectstore.exceptions import InvalidPathError

S3_SCHEME = "s3://"
S3A_SCHEME = "s3a://"


def ensure_suffix(value: str, suffix: str) -> str:
    """Append suffix to value unless it is already there."""
    if value.endswith(suffix):
        return value
    return value + suffix


def _join(*parts: str) -> str:
    joined = "/".join(part for part in parts if part)
    if not joined:
        return ""
    return posixpath.normpath(joined)


def _is_valid_path(path: str, scheme: str) -> bool:
    if not path.startswith(scheme):
        return False
    parts = path[len(scheme):].split("/")
    if len(parts) < 2:
        return False
    if parts[0] == "" or parts[1] == "":
        return False
    return True


def _split_path(path: str, scheme: str) -> Tuple[str, str]:
    if not _is_valid_path(path, scheme):
        raise InvalidPathError(path, scheme)
    bucket, key = path[len(scheme):].split("/", 1)
    return bucket, key


def is_valid_s3_path(path: str) -> bool:
    """
    Check that path looks like s3://bucket/key.

    Both the bucket segment and the first key segment must be non-empty.
    """
    return _is_valid_path(path, S3_SCHEME)


def is_valid_s3a_path(path: str) -> bool:
    """Same as is_valid_s3_path, for the s3a:// scheme."""
    return _is_valid_path(path, S3A_SCHEME)


def split_s3_path(path: str) -> Tuple[str, str]:
    """
    Split s3://bucket/key into (bucket, key).

    Raises:
        InvalidPathError: If the path is not a valid s3:// path
    """
    return _split_path(path, S3_SCHEME)


def split_s3a_path(path: str) -> Tuple[str, str]:
    """Split s3a://bucket/key into (bucket, key)."""
    return _split_path(path, S3A_SCHEME)


def join_s3_paths(*paths: str) -> str:
    """
    Join an s3:// path with further path components.

    The first argument must carry the s3:// scheme; the rest are plain
    components. Returns "" when called with no arguments.

    >>> join_s3_paths("s3://b/x", "y", "z")
    's3://b/x/y/z'
    """
    if not paths:
        return ""
    first = paths[0][len(S3_SCHEME):]
    return S3_SCHEME + _join(first, *paths[1:])
