"""Core domain types and logic."""

from .errors import ErrorCode
from .manifest import Binary, Manifest, ManifestError, load_manifest
from .result import Err, Ok, Result, is_err, is_ok
from .version import InvalidVersionError, should_replace

__all__ = [
    # errors
    "ErrorCode",
    # manifest
    "Binary",
    "Manifest",
    "ManifestError",
    "load_manifest",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
    # version
    "InvalidVersionError",
    "should_replace",
]
