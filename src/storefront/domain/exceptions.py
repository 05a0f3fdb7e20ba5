"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated.

    ``errors`` maps a field name to a message when the violation can be
    attributed to specific user input (checkout forms); it is empty for
    plain invariant violations.
    """

    def __init__(self, message: str, errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.errors: dict[str, str] = dict(errors or {})

    @classmethod
    def for_fields(cls, errors: dict[str, str]) -> ValidationError:
        fields = ", ".join(errors)
        return cls(f"Invalid customer details: {fields}", errors)


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class RemoteStoreError(Exception):
    """The remote store could not be reached or gave an unusable answer.

    Raised by repository implementations; not a business rule violation.
    """


class OrderSubmissionError(DomainException):
    """An order could not be written to the remote store.

    The cart is left untouched whenever this is raised.
    """

    def __init__(self, message: str, reference: str | None = None) -> None:
        super().__init__(message)
        self.reference = reference


class DuplicateOrderError(OrderSubmissionError):
    """An order header with the same reference code already exists."""


class PartialWriteError(OrderSubmissionError):
    """The header was written, an item failed, and cleanup failed too.

    The remote store now holds a header with fewer item rows than the
    cart had.
    """

    def __init__(self, message: str, reference: str, order_id: int) -> None:
        super().__init__(message, reference)
        self.order_id = order_id
