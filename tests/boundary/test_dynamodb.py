"""
Unit tests for DynamoDB repositories.

Dependencies: pytest, unittest.mock, backend.boundary.aws.dynamodb
System role: Key-value persistence validation
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from backend.boundary.aws.dynamodb import (
    ConnectionRepository,
    EnergyUsageRepository,
    UserDataRepository,
)
from backend.models.energy import EnergyRecord


@pytest.fixture
def table() -> MagicMock:
    return MagicMock()


@pytest.fixture
def resource(table) -> MagicMock:
    resource = MagicMock()
    resource.Table.return_value = table
    return resource


class TestEnergyUsageRepository:
    """Test usage readings table access."""

    def test_put_record_converts_floats(self, resource, table) -> None:
        """Should store usage as Decimal and omit unset attributes."""
        repository = EnergyUsageRepository("EnergyUsage", resource=resource)

        repository.put_record(
            EnergyRecord(user_id="u1", date="2024-01-01", energy_usage=12.5, source="manual", ttl=100)
        )

        resource.Table.assert_called_once_with("EnergyUsage")
        item = table.put_item.call_args.kwargs["Item"]
        assert item == {
            "UserId": "u1",
            "Date": "2024-01-01",
            "EnergyUsage": Decimal("12.5"),
            "Source": "manual",
            "TTL": 100,
        }

    def test_query_range_follows_pages(self, resource, table) -> None:
        """Should query every page and convert Decimals back."""
        table.query.side_effect = [
            {
                "Items": [{"UserId": "u1", "Date": "2024-01-01", "EnergyUsage": Decimal("3")}],
                "LastEvaluatedKey": {"UserId": "u1", "Date": "2024-01-01"},
            },
            {"Items": [{"UserId": "u1", "Date": "2024-01-02", "EnergyUsage": Decimal("4.5")}]},
        ]
        repository = EnergyUsageRepository("EnergyUsage", resource=resource)

        records = repository.query_range("u1", "2024-01-01", "2024-01-31")

        assert [(record.date, record.energy_usage) for record in records] == [
            ("2024-01-01", 3),
            ("2024-01-02", 4.5),
        ]
        assert table.query.call_count == 2
        second_call = table.query.call_args_list[1].kwargs
        assert second_call["ExclusiveStartKey"] == {"UserId": "u1", "Date": "2024-01-01"}

    def test_latest_queries_descending(self, resource, table) -> None:
        """Should fetch one projected row, newest first."""
        table.query.return_value = {"Items": [{"EnergyUsage": Decimal("42"), "Date": "2024-02-01"}]}
        repository = EnergyUsageRepository("EnergyUsage", resource=resource)

        latest = repository.latest("u1")

        assert latest == {"EnergyUsage": 42, "Date": "2024-02-01"}
        kwargs = table.query.call_args.kwargs
        assert kwargs["ScanIndexForward"] is False
        assert kwargs["Limit"] == 1
        assert kwargs["ProjectionExpression"] == "EnergyUsage, #date"
        assert kwargs["ExpressionAttributeNames"] == {"#date": "Date"}

    def test_latest_without_readings(self, resource, table) -> None:
        table.query.return_value = {"Items": []}

        assert EnergyUsageRepository("EnergyUsage", resource=resource).latest("u1") is None

    def test_scan_all(self, resource, table) -> None:
        """Should scan every page of the table."""
        table.scan.side_effect = [
            {"Items": [{"UserId": "a", "Date": "2024-01-01", "EnergyUsage": 1}], "LastEvaluatedKey": {"k": 1}},
            {"Items": [{"UserId": "b", "Date": "2024-01-01", "EnergyUsage": 2}]},
        ]

        records = EnergyUsageRepository("EnergyUsage", resource=resource).scan_all()

        assert [record.user_id for record in records] == ["a", "b"]


class TestUserDataRepository:
    """Test per-user settings access."""

    def test_set_threshold_updates_in_place(self, resource, table) -> None:
        """Should update only threshold and TTL, keeping endpoint attributes."""
        UserDataRepository("UserData", resource=resource).set_threshold("u1", 25.5, ttl=999)

        kwargs = table.update_item.call_args.kwargs
        assert kwargs["Key"] == {"UserId": "u1"}
        assert kwargs["UpdateExpression"] == "SET #threshold = :threshold, #ttl = :ttl"
        assert kwargs["ExpressionAttributeValues"] == {":threshold": Decimal("25.5"), ":ttl": 999}
        table.put_item.assert_not_called()

    def test_get_missing_row(self, resource, table) -> None:
        table.get_item.return_value = {}

        assert UserDataRepository("UserData", resource=resource).get("u1") is None

    def test_get_converts_numbers(self, resource, table) -> None:
        table.get_item.return_value = {"Item": {"UserId": "u1", "threshold": Decimal("30")}}

        assert UserDataRepository("UserData", resource=resource).get("u1") == {"UserId": "u1", "threshold": 30}


class TestConnectionRepository:
    """Test WebSocket connection rows."""

    def test_put_and_delete_use_connection_key(self, resource, table) -> None:
        """Should store by ConnectionId and delete by ConnectionId."""
        repository = ConnectionRepository("Connections", resource=resource)

        item = repository.put("u1", "conn-1", ttl=123, created_at="2024-01-01T00:00:00+00:00")
        repository.delete("conn-1")

        table.put_item.assert_called_once_with(Item=item)
        table.delete_item.assert_called_once_with(Key={"ConnectionId": "conn-1"})

    def test_for_user_queries_index(self, resource, table) -> None:
        """Should look connections up through the UserId index."""
        table.query.return_value = {"Items": [{"ConnectionId": "c1", "UserId": "u1", "TTL": Decimal("5")}]}
        repository = ConnectionRepository("Connections", resource=resource, user_index="ByUser")

        connections = repository.for_user("u1")

        assert connections == [{"ConnectionId": "c1", "UserId": "u1", "TTL": 5}]
        assert table.query.call_args.kwargs["IndexName"] == "ByUser"
