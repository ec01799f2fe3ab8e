"""Name feature module for nmcrpc.

This module provides name functionality outside of registration:
- Look up a name's value, owner and expiry
- List the names owned by the wallet
- Update names and send them to other addresses
"""

from nmcrpc.features.names.service import (
    NameInfo,
    NameNotFoundError,
    NameService,
    split_name,
)
from nmcrpc.features.names.validators import NameValidator, ValidationResult

__all__ = [
    "NameInfo",
    "NameNotFoundError",
    "NameService",
    "NameValidator",
    "ValidationResult",
    "split_name",
]
