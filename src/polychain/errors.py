"""Exception hierarchy shared by derivation, encoding and dispatch."""

from typing import Optional


class PolychainError(Exception):
    """Base class for all errors raised by this package."""
    pass


class UnsupportedProtocol(PolychainError):
    """Operation/protocol combination is not implemented."""
    pass


class InvalidDerivationPath(PolychainError):
    """Derivation coordinates are out of range or not expressible."""
    pass


class InvalidKeyMaterial(PolychainError):
    """Mnemonic, private key or extended key is structurally malformed."""
    pass


class ValidationFailed(PolychainError):
    """Request fields failed validation.

    Attributes:
        reason: The first rule that was violated
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class InvalidAmount(ValidationFailed):
    """Amount is missing, non-numeric or negative where one is required."""

    def __init__(self, reason: str = "Invalid amount"):
        super().__init__(reason)


class ProbeUnavailable(PolychainError):
    """Capability detection could not reach the node."""
    pass


class ProbeTimeout(ProbeUnavailable):
    """Capability detection timed out or was cancelled."""
    pass


class NotImplementedOperation(PolychainError):
    """Operation kind is declared but intentionally not implemented."""
    pass


class ChainQueryError(PolychainError):
    """Read-only query collaborator failed.

    Attributes:
        status_code: HTTP status returned by the API, if any
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
