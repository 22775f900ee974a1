"""
Tests for RecordQuery (query/record_query.py)

Covers the Scan requests built by the where* family, soft-delete visibility,
key lookups and bulk operations against a mocked TableGateway.
"""

from unittest.mock import call

import pytest

from dynamodb_record.exceptions import (
    BulkOperationError,
    InvalidOperatorError,
    RecordNotFoundError,
    RetryableError,
    SoftDeleteNotEnabledError,
    ValidationError,
)
from dynamodb_record.query import RecordQuery
from dynamodb_record.query.record_query import attributes_to_get
from tests.helpers.models import Invoice, Order

OK = {'ResponseMetadata': {'HTTPStatusCode': 200}}


def scan_page(*ids, last_key=None):
    """Build a Scan response holding one item per id."""
    response = {'Items': [{'id': {'S': i}, 'status': {'S': 'paid'}} for i in ids], **OK}
    if last_key:
        response['LastEvaluatedKey'] = {'id': {'S': last_key}}
    return response


def sent_filter(mock_gateway):
    return mock_gateway.scan.call_args.kwargs['scan_filter']


class TestWhere:

    def test_two_argument_form_is_equality(self, mock_gateway):
        Order.where("status", "paid").get()

        assert sent_filter(mock_gateway) == {
            'status': {'ComparisonOperator': 'EQ', 'AttributeValueList': [{'S': 'paid'}]}
        }

    def test_operator_form(self, mock_gateway):
        Order.where("total", ">", 100).get()

        assert sent_filter(mock_gateway) == {
            'total': {'ComparisonOperator': 'GT', 'AttributeValueList': [{'N': '100'}]}
        }

    def test_like_is_contains(self, mock_gateway):
        Order.where("email", "like", "example").get()

        assert sent_filter(mock_gateway)['email']['ComparisonOperator'] == 'CONTAINS'

    def test_chained_clauses(self, mock_gateway):
        Order.where("status", "paid").where("total", "<=", 50).where_not_null("email").get()

        assert sent_filter(mock_gateway) == {
            'status': {'ComparisonOperator': 'EQ', 'AttributeValueList': [{'S': 'paid'}]},
            'total': {'ComparisonOperator': 'LE', 'AttributeValueList': [{'N': '50'}]},
            'email': {'ComparisonOperator': 'NOT_NULL'},
        }

    def test_where_null(self, mock_gateway):
        Order.where_null("shipped_at").get()

        assert sent_filter(mock_gateway) == {'shipped_at': {'ComparisonOperator': 'NULL'}}

    def test_where_in(self, mock_gateway):
        Order.where_in("status", ["paid", "shipped"]).get()

        assert sent_filter(mock_gateway)['status'] == {
            'ComparisonOperator': 'IN',
            'AttributeValueList': [{'S': 'paid'}, {'S': 'shipped'}]
        }

    def test_where_between(self, mock_gateway):
        Order.where_between("total", [10, 20]).get()

        assert sent_filter(mock_gateway)['total']['ComparisonOperator'] == 'BETWEEN'

    def test_where_begins_with(self, mock_gateway):
        Order.where_begins_with("email", "sales@").get()

        assert sent_filter(mock_gateway)['email'] == {
            'ComparisonOperator': 'BEGINS_WITH',
            'AttributeValueList': [{'S': 'sales@'}]
        }

    def test_invalid_operator_raised_before_scan(self, mock_gateway):
        with pytest.raises(InvalidOperatorError):
            Order.where("total", "=>", 100)

        mock_gateway.scan.assert_not_called()

    def test_between_needs_two_values(self, mock_gateway):
        with pytest.raises(ValidationError):
            Order.where_between("total", [10])

    def test_no_filter_sent_without_clauses(self, mock_gateway):
        Order.all()

        assert sent_filter(mock_gateway) == {}

    def test_repr(self):
        assert repr(Order.query()).startswith("RecordQuery(Order")


class TestSoftDeleteScope:

    def test_trashed_hidden_by_default(self, mock_gateway):
        Invoice.where("status", "open").get()

        assert sent_filter(mock_gateway) == {
            'status': {'ComparisonOperator': 'EQ', 'AttributeValueList': [{'S': 'open'}]},
            'deleted_at': {'ComparisonOperator': 'NULL'},
        }

    def test_with_trashed(self, mock_gateway):
        Invoice.with_trashed().get()

        assert sent_filter(mock_gateway) == {}

    def test_only_trashed(self, mock_gateway):
        Invoice.only_trashed().get()

        assert sent_filter(mock_gateway) == {'deleted_at': {'ComparisonOperator': 'NOT_NULL'}}

    def test_scope_does_not_change_query_filters(self, mock_gateway):
        query = Invoice.where("status", "open")

        query.get()

        assert "deleted_at" not in query.filters

    @pytest.mark.parametrize("method", ["with_trashed", "only_trashed"])
    def test_requires_soft_deletes(self, method, mock_gateway):
        with pytest.raises(SoftDeleteNotEnabledError):
            getattr(Order, method)()


class TestFetching:

    def test_get_materializes_records(self, mock_gateway):
        mock_gateway.scan.return_value = scan_page("a", "b")

        orders = Order.where("status", "paid").get()

        assert [o.id for o in orders] == ["a", "b"]
        assert all(isinstance(o, Order) and o.exists for o in orders)

    def test_get_follows_pages(self, mock_gateway):
        mock_gateway.scan.side_effect = [scan_page("a", last_key="a"), scan_page("b")]

        orders = Order.all()

        assert [o.id for o in orders] == ["a", "b"]
        assert mock_gateway.scan.call_count == 2
        assert mock_gateway.scan.call_args_list[1].kwargs['exclusive_start_key'] == {'id': {'S': 'a'}}

    def test_projection(self, mock_gateway):
        Order.all(["id", "status"])

        assert mock_gateway.scan.call_args.kwargs['attributes_to_get'] == ["id", "status"]

    @pytest.mark.parametrize("columns", [None, ["*"], [], "*"])
    def test_all_columns(self, columns):
        assert attributes_to_get(columns) is None

    def test_single_column_string(self):
        assert attributes_to_get("status") == ["status"]

    def test_first_and_last(self, mock_gateway):
        mock_gateway.scan.return_value = scan_page("a", "b", "c")

        assert Order.first().id == "a"
        assert Order.last().id == "c"

    def test_first_of_empty_result(self, mock_gateway):
        assert Order.first() is None
        assert Order.last() is None

    def test_first_or_fail(self, mock_gateway):
        with pytest.raises(RecordNotFoundError) as exc_info:
            Order.where("status", "void").first_or_fail()

        assert exc_info.value.model == "Order"
        assert exc_info.value.key is None


class TestFind:

    def test_find(self, mock_gateway):
        mock_gateway.get_item.return_value = {'Item': {'id': {'S': 'order-1'}, 'status': {'S': 'paid'}}, **OK}

        order = Order.find("order-1")

        mock_gateway.get_item.assert_called_once_with({'id': {'S': 'order-1'}}, None)
        assert order.id == "order-1"
        assert order.exists

    def test_find_with_columns(self, mock_gateway):
        Order.find("order-1", ["status"])

        mock_gateway.get_item.assert_called_once_with({'id': {'S': 'order-1'}}, ["status"])

    def test_find_missing(self, mock_gateway):
        assert Order.find("missing") is None

    def test_find_ignores_filters_and_scope(self, mock_gateway):
        mock_gateway.get_item.return_value = {
            'Item': {'id': {'S': 'inv-1'}, 'deleted_at': {'S': '2024-01-01T00:00:00+00:00'}}, **OK
        }

        invoice = Invoice.where("status", "open").find("inv-1")

        mock_gateway.scan.assert_not_called()
        assert invoice.trashed()

    def test_find_or_fail(self, mock_gateway):
        with pytest.raises(RecordNotFoundError) as exc_info:
            Order.find_or_fail("missing")

        assert exc_info.value.key == "missing"
        assert "missing" in str(exc_info.value)


class TestFirstOrCreate:

    def test_returns_existing(self, mock_gateway):
        mock_gateway.scan.return_value = scan_page("a")

        order = Order.first_or_create({"status": "paid"}, {"email": "x@example.com"})

        assert order.id == "a"
        mock_gateway.put_item.assert_not_called()

    def test_creates_missing(self, mock_gateway):
        order = Order.first_or_create({"status": "paid"}, {"email": "x@example.com", "status": "void"})

        assert order.exists
        assert order.status == "paid"
        assert order.email == "x@example.com"
        mock_gateway.put_item.assert_called_once()
        assert sent_filter(mock_gateway) == {
            'status': {'ComparisonOperator': 'EQ', 'AttributeValueList': [{'S': 'paid'}]}
        }


class TestBulkOperations:

    def test_bulk_delete(self, mock_gateway):
        mock_gateway.scan.return_value = scan_page("a", "b")

        assert Order.where("status", "paid").delete() is True

        assert mock_gateway.delete_item.call_args_list == [
            call({'id': {'S': 'a'}}),
            call({'id': {'S': 'b'}}),
        ]

    def test_bulk_delete_of_nothing(self, mock_gateway):
        assert Order.where("status", "void").delete() is True

        mock_gateway.delete_item.assert_not_called()

    def test_partial_failure_attempts_every_record(self, mock_gateway):
        mock_gateway.scan.return_value = scan_page("a", "b", "c")
        throttled = RetryableError("Throttling")
        mock_gateway.delete_item.side_effect = [
            dict(OK),
            throttled,
            {'ResponseMetadata': {'HTTPStatusCode': 500}},
        ]

        with pytest.raises(BulkOperationError) as exc_info:
            Order.query().delete()

        error = exc_info.value
        assert mock_gateway.delete_item.call_count == 3
        assert error.operation == "delete"
        assert error.succeeded == ["a"]
        assert error.failed == {"b": throttled, "c": None}
        assert error.original_error is throttled

    def test_bulk_soft_delete(self, mock_gateway):
        mock_gateway.scan.return_value = scan_page("a")

        Invoice.query().delete()

        mock_gateway.delete_item.assert_not_called()
        assert list(mock_gateway.update_item.call_args.args[1]) == ['deleted_at']

    def test_bulk_force_delete(self, mock_gateway):
        mock_gateway.scan.return_value = scan_page("a")

        Invoice.only_trashed().force_delete()

        assert sent_filter(mock_gateway) == {'deleted_at': {'ComparisonOperator': 'NOT_NULL'}}
        mock_gateway.delete_item.assert_called_once_with({'id': {'S': 'a'}})

    def test_bulk_restore_reads_trashed_records(self, mock_gateway):
        mock_gateway.scan.return_value = scan_page("a", "b")

        assert Invoice.query().restore() is True

        assert sent_filter(mock_gateway) == {'deleted_at': {'ComparisonOperator': 'NOT_NULL'}}
        assert mock_gateway.update_item.call_count == 2
        assert mock_gateway.update_item.call_args.args[1] == {'deleted_at': {'Action': 'DELETE'}}

    def test_bulk_restore_with_trashed(self, mock_gateway):
        Invoice.with_trashed().restore()

        assert sent_filter(mock_gateway) == {}

    def test_bulk_restore_requires_soft_deletes(self, mock_gateway):
        with pytest.raises(SoftDeleteNotEnabledError):
            Order.query().restore()

        mock_gateway.scan.assert_not_called()

    def test_query_is_a_record_query(self):
        assert isinstance(Order.where("status", "paid"), RecordQuery)
