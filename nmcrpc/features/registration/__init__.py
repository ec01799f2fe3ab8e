"""Registration feature module for nmcrpc.

This module provides name registration functionality:
- Reserve a name with name_new and activate it with name_firstupdate
- Track many registrations across program runs
- Save and restore the registration state as JSON
"""

from nmcrpc.features.registration.manager import RegistrationManager
from nmcrpc.features.registration.process import (
    FormatError,
    InvalidStateError,
    NameAlreadyReservedError,
    NameRegistration,
    NotYetEligibleError,
    RegistrationState,
)

__all__ = [
    "FormatError",
    "InvalidStateError",
    "NameAlreadyReservedError",
    "NameRegistration",
    "NotYetEligibleError",
    "RegistrationManager",
    "RegistrationState",
]
