"""Host detection, user paths and filesystem helpers."""

from .detection import Host, detect
from .paths import home, local_bin_dir

__all__ = ["Host", "detect", "home", "local_bin_dir"]
