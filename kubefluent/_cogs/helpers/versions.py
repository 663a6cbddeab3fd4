"""
Detecting the library's own version.

The codebase does not contain the version directly. It is taken from the
installed distribution's metadata once, when the code is loaded.
"""
import importlib.metadata
from typing import Optional

version: Optional[str] = None

try:
    name, *_ = __name__.split('.')  # usually "kubefluent", unless renamed/forked.
    version = importlib.metadata.version(name)
except importlib.metadata.PackageNotFoundError:
    pass  # running from a source checkout without installation.
