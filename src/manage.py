"""Storefront management CLI.

Creates and drops the database schema, and lists or resolves reconciliation
items (payments captured without a recorded order).

Usage:
    python src/manage.py setup-db
    python src/manage.py drop-db
    python src/manage.py reconciliation
    python src/manage.py reconciliation --resolve <item-id> --note "Refunded"
"""

import argparse
import sys


def _initialized_domain():
    from storefront.domain import storefront

    storefront.init()
    return storefront


def setup_database():
    """Create all storefront tables."""
    from storefront.utils.db import setup_db

    domain = _initialized_domain()
    print("Creating storefront database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    """Drop all storefront tables."""
    from storefront.utils.db import drop_db

    domain = _initialized_domain()
    print("Dropping storefront database schema...")
    drop_db(domain)
    print("Done.")


def list_reconciliation_items():
    from storefront.payments.reconciliation import ReconciliationItem

    domain = _initialized_domain()
    with domain.domain_context():
        items = domain.repository_for(ReconciliationItem).find_open()

    if not items:
        print("No open reconciliation items.")
        return

    for item in items:
        print(
            f"{item.id}  {item.recorded_at:%Y-%m-%d %H:%M:%S}  {item.reference}  "
            f"txn={item.transaction_id}  {item.amount:.2f} {item.currency}  {item.reason}"
        )
    print(f"{len(items)} open item(s).")


def resolve_reconciliation_item(item_id, note=None):
    from storefront.payments.reconciliation import ResolveReconciliationItem

    domain = _initialized_domain()
    with domain.domain_context():
        domain.process(ResolveReconciliationItem(item_id=item_id, note=note), asynchronous=False)
    print(f"Resolved {item_id}.")


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    reconciliation_parser = subparsers.add_parser("reconciliation", help="List or resolve reconciliation items")
    reconciliation_parser.add_argument("--resolve", metavar="ITEM_ID", help="Mark an item as resolved")
    reconciliation_parser.add_argument("--note", help="Resolution note")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "reconciliation":
        if args.resolve:
            resolve_reconciliation_item(args.resolve, args.note)
        else:
            list_reconciliation_items()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
