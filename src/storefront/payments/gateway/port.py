"""Payment gateway port (abstract interface).

Every payment method the store accepts is served by one `PaymentGateway`.
The checkout resolves the gateway by method, calls `charge` exactly once and
only looks at the returned `ChargeResult`; adapters never touch local state.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from enum import Enum

from storefront.shared.errors import UnsupportedPaymentMethodError


class PaymentMethod(Enum):
    CREDIT_CARD = "credit_card"

    @classmethod
    def parse(cls, tag) -> "PaymentMethod":
        """Resolve a caller-supplied tag (case-insensitive) to a method."""
        if isinstance(tag, cls):
            return tag
        if not isinstance(tag, str) or not tag.strip():
            raise UnsupportedPaymentMethodError(tag)
        try:
            return cls(tag.strip().lower())
        except ValueError:
            raise UnsupportedPaymentMethodError(tag) from None


@dataclass(frozen=True)
class CardDetails:
    number: str
    cvv: str
    expiry_month: int
    expiry_year: int
    holder_name: str

    @property
    def last4(self) -> str:
        return self.number[-4:]

    def is_expired(self, today: date | None = None) -> bool:
        today = today or date.today()
        return (self.expiry_year, self.expiry_month) < (today.year, today.month)

    def __repr__(self) -> str:
        return f"CardDetails(last4={self.last4!r}, expiry={self.expiry_month:02d}/{self.expiry_year})"


@dataclass(frozen=True)
class ChargeResult:
    """Outcome of a single charge attempt."""

    success: bool
    transaction_id: str | None = None
    message: str | None = None
    status: str | None = None


@dataclass(frozen=True)
class TransactionStatus:
    transaction_id: str
    status: str
    amount: float | None = None
    currency: str | None = None
    message: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def charge(
        self,
        card: CardDetails,
        amount: float,
        currency: str,
        description: str | None,
        reference: str,
    ) -> ChargeResult:
        """Attempt to capture `amount` from `card`. Never raises for a decline."""
        ...

    @abstractmethod
    def query_transaction(self, transaction_id: str) -> TransactionStatus:
        """Look up a previous charge, for reconciliation."""
        ...
