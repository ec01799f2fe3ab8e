"""Feature modules for nmcrpc.

This package contains self-contained feature modules organized by functionality:

- coin: Addresses, balance, message signatures and wallet unlocking
- names: Name lookup, listing and updates
- registration: Two-phase name registration and its persistent state
"""

from nmcrpc.features import coin
from nmcrpc.features import names
from nmcrpc.features import registration

__all__ = ["coin", "names", "registration"]
