"""Customer registration: command and handler."""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.customer import Customer


@storefront.command(part_of="Customer")
class RegisterCustomer:
    """Create a customer record that orders can be placed against."""

    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)


@storefront.command_handler(part_of=Customer)
class RegisterCustomerHandler:
    @handle(RegisterCustomer)
    def register_customer(self, command):
        customer = Customer.register(name=command.name, email=command.email)
        current_domain.repository_for(Customer).add(customer)
        return str(customer.id)
