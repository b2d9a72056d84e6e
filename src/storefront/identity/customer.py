"""Customer aggregate: the identity that places and owns orders.

Registration and login live outside the store; checkout only needs to know
that the customer behind an access token still exists.
"""

import re
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from storefront.domain import storefront
from storefront.identity.events import CustomerRegistered

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@storefront.aggregate
class Customer:
    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254, unique=True)
    registered_at: DateTime(default=lambda: datetime.now(UTC))

    @invariant.post
    def email_must_be_well_formed(self):
        if self.email and not _EMAIL_PATTERN.match(self.email):
            raise ValidationError({"email": [f"Invalid email address: {self.email}"]})

    @classmethod
    def register(cls, name, email):
        now = datetime.now(UTC)
        customer = cls(name=name, email=email.strip().lower(), registered_at=now)
        customer.raise_(
            CustomerRegistered(
                customer_id=customer.id,
                name=name,
                email=customer.email,
                registered_at=now,
            )
        )
        return customer
