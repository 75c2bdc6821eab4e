from typing import List, Optional


class RecycleError(Exception):
    """Base class for every error the kiosk reports to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def lines(self) -> List[str]:
        return [line for line in self.message.splitlines() if line.strip()] or [self.message]


class BarcodeValidationError(RecycleError):
    """Local input problem (empty barcode, empty selection). Never reaches the network."""


class DecodeAmbiguityError(RecycleError):
    def __init__(self, message: str, count: int, first_value: Optional[str] = None):
        super().__init__(message)
        self.count = count
        self.first_value = first_value


class FetchError(RecycleError):
    """Transport or server failure. `message` holds the raw response text."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class BarcodeUnavailableError(RecycleError):
    pass
