"""LinkOps LinkCheck -- HTTP probe layer for submitted backlinks

Public interface of packages/linkcheck.
"""

from .client import LinkChecker
from .config import LinkCheckConfig, load_link_check_config
from .exceptions import LinkCheckError, LinkUnreachableError
from .models import LinkCheckResult

__all__ = [
    "LinkChecker",
    "LinkCheckConfig",
    "load_link_check_config",
    "LinkCheckResult",
    "LinkCheckError",
    "LinkUnreachableError",
]
