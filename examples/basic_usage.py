#!/usr/bin/env python3
"""
Basic usage examples for dynamodb_record.

This example demonstrates:
1. Setting up configuration
2. Declaring record types (with and without soft deletes)
3. Creating, updating and finding records
4. Fluent where queries executed as Scans
5. Soft deletes, restore and force delete
"""

import logging
from decimal import Decimal

from dynamodb_record import (
    DynamoDBConfig,
    Record,
    RecordNotFoundError,
    SoftDeletes,
    configure,
)


class Order(Record):
    table_name = "orders"
    mutators = {"email": str.lower}
    accessors = {"quantity": int}

    status: str = "pending"


class Invoice(Record):
    # Bound to the "invoices" table
    soft_deletes = SoftDeletes()


def main():
    """Demonstrate basic usage of the active-record layer."""
    logging.basicConfig(level=logging.INFO)

    # 1. Configure DynamoDB connection
    print("1. Setting up DynamoDB configuration...")
    config = DynamoDBConfig.from_env()  # Uses environment variables

    # For local development, you might use:
    # config = DynamoDBConfig.for_local_development()
    configure(config)

    # 2. Create records
    print("2. Creating records...")
    order = Order(status="paid", email="Buyer@Example.com", total=Decimal("42.50"), quantity=2)
    order.save()
    print(f"Created order {order.id} at {order.created_at}")

    # 3. Update a record
    print("3. Updating record...")
    order.status = "shipped"
    order.tracking_number = "1Z999AA10123456784"
    order.save()
    print(f"Order updated at {order.updated_at}")

    # 4. Find by key
    print("4. Finding records...")
    found = Order.find(order.id)
    print(f"Found order with status {found.status}")

    try:
        Order.find_or_fail("missing-order")
    except RecordNotFoundError as e:
        print(f"Lookup failed: {e}")

    # 5. Query with where clauses
    print("5. Querying...")
    shipped = Order.where("status", "shipped").where("total", ">", 10).get()
    print(f"Shipped orders over 10: {len(shipped)}")

    emails = Order.where_begins_with("email", "buyer").get(["id", "email"])
    print(f"Orders from buyer: {[o.email for o in emails]}")

    newest = Order.where_in("status", ["paid", "shipped"]).last()
    print(f"Last matching order: {newest.id if newest else None}")

    # 6. Soft deletes
    print("6. Soft deletes...")
    invoice = Invoice.first_or_create({"number": "INV-1001"}, {"amount": Decimal("42.50")})
    invoice.delete()
    print(f"Invoice trashed: {invoice.trashed()}")
    print(f"Visible invoices: {len(Invoice.all())}")
    print(f"Trashed invoices: {len(Invoice.only_trashed().get())}")

    Invoice.query().restore()
    print(f"Visible invoices after restore: {len(Invoice.all())}")

    # 7. Cleanup
    print("7. Cleaning up...")
    Invoice.with_trashed().force_delete()
    Order.where("status", "shipped").delete()

    print("\nExample completed!")


if __name__ == "__main__":
    main()
