"""
DynamoDB repositories.

One repository per table: energy usage readings, per-user settings
(alert threshold and prediction endpoint) and WebSocket connections.
Queries follow LastEvaluatedKey until exhausted.

Dependencies: boto3
System role: Key-value persistence
"""

import logging
from decimal import Decimal
from typing import Any, Iterator

import boto3
from boto3.dynamodb.conditions import Key

from backend.models.energy import EnergyRecord

logger = logging.getLogger(__name__)


def _to_dynamo(value: Any) -> Any:
    """Convert floats to Decimal, which the resource API requires."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {key: _to_dynamo(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_to_dynamo(item) for item in value]
    return value


def _from_dynamo(value: Any) -> Any:
    """Convert Decimal back to int or float."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {key: _from_dynamo(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_from_dynamo(item) for item in value]
    return value


class _TableRepository:
    """Shared table handle and pagination."""

    def __init__(self, table_name: str, region: str = "us-east-1", resource=None) -> None:
        """
        Initialize repository for one table.

        Args:
            table_name: DynamoDB table name
            region: AWS region
            resource: Preconfigured boto3 DynamoDB resource (created when omitted)
        """
        self._table_name = table_name
        resource = resource or boto3.resource("dynamodb", region_name=region)
        self._table = resource.Table(table_name)

    def _paginate(self, operation: str, **kwargs) -> Iterator[dict]:
        method = getattr(self._table, operation)
        while True:
            response = method(**kwargs)
            items = response.get("Items", [])
            logger.debug(
                "Fetched page",
                extra={
                    "table": self._table_name,
                    "operation": operation,
                    "batch_size": len(items),
                    "has_more": "LastEvaluatedKey" in response,
                },
            )
            for item in items:
                yield _from_dynamo(item)
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return
            kwargs["ExclusiveStartKey"] = last_key


class EnergyUsageRepository(_TableRepository):
    """Usage readings keyed by (UserId, Date)."""

    def put_record(self, record: EnergyRecord) -> None:
        """
        Store a reading, replacing any reading for the same user and date.

        Args:
            record: Reading to store
        """
        self._table.put_item(Item=_to_dynamo(record.to_item()))

    def query_range(self, user_id: str, start_date: str, end_date: str) -> list[EnergyRecord]:
        """
        Readings of a user between two dates, inclusive.

        Args:
            user_id: Cognito sub
            start_date: First date YYYY-MM-DD
            end_date: Last date YYYY-MM-DD

        Returns:
            list[EnergyRecord]: Readings in date order
        """
        items = self._paginate(
            "query",
            KeyConditionExpression=Key("UserId").eq(user_id)
            & Key("Date").between(start_date, end_date),
        )
        return [EnergyRecord.model_validate(item) for item in items]

    def query_all(self, user_id: str) -> list[EnergyRecord]:
        """All readings of a user in date order."""
        items = self._paginate("query", KeyConditionExpression=Key("UserId").eq(user_id))
        return [EnergyRecord.model_validate(item) for item in items]

    def latest(self, user_id: str) -> dict | None:
        """
        Most recent reading of a user.

        Args:
            user_id: Cognito sub

        Returns:
            dict | None: {"EnergyUsage", "Date"} or None when the user has no readings
        """
        response = self._table.query(
            KeyConditionExpression=Key("UserId").eq(user_id),
            ProjectionExpression="EnergyUsage, #date",
            ExpressionAttributeNames={"#date": "Date"},
            ScanIndexForward=False,
            Limit=1,
        )
        items = response.get("Items", [])
        return _from_dynamo(items[0]) if items else None

    def scan_all(self) -> list[EnergyRecord]:
        """Every reading in the table."""
        return [EnergyRecord.model_validate(item) for item in self._paginate("scan")]


class UserDataRepository(_TableRepository):
    """Per-user settings keyed by UserId."""

    def get(self, user_id: str) -> dict | None:
        """
        Settings row of a user.

        Args:
            user_id: Cognito sub

        Returns:
            dict | None: Row attributes, or None when absent
        """
        response = self._table.get_item(Key={"UserId": user_id})
        item = response.get("Item")
        return _from_dynamo(item) if item else None

    def set_threshold(self, user_id: str, threshold: float, ttl: int) -> None:
        """
        Set the alert threshold, keeping the row's other attributes.

        Args:
            user_id: Cognito sub
            threshold: Alert threshold in kWh
            ttl: Row expiry epoch seconds
        """
        self._table.update_item(
            Key={"UserId": user_id},
            UpdateExpression="SET #threshold = :threshold, #ttl = :ttl",
            ExpressionAttributeNames={"#threshold": "threshold", "#ttl": "TTL"},
            ExpressionAttributeValues={
                ":threshold": _to_dynamo(threshold),
                ":ttl": ttl,
            },
        )


class ConnectionRepository(_TableRepository):
    """WebSocket connections keyed by ConnectionId, indexed by UserId."""

    def __init__(
        self,
        table_name: str,
        region: str = "us-east-1",
        resource=None,
        user_index: str = "UserIdIndex",
    ) -> None:
        """
        Initialize connection repository.

        Args:
            table_name: Connections table name
            region: AWS region
            resource: Preconfigured boto3 DynamoDB resource
            user_index: Global secondary index on UserId
        """
        super().__init__(table_name, region, resource)
        self._user_index = user_index

    def put(self, user_id: str, connection_id: str, ttl: int, created_at: str) -> dict:
        """
        Record an open connection.

        Returns:
            dict: Stored item
        """
        item = {
            "UserId": user_id,
            "ConnectionId": connection_id,
            "TTL": ttl,
            "CreatedAt": created_at,
        }
        self._table.put_item(Item=item)
        return item

    def delete(self, connection_id: str) -> None:
        """Forget a connection."""
        self._table.delete_item(Key={"ConnectionId": connection_id})

    def for_user(self, user_id: str) -> list[dict]:
        """
        Open connections of a user.

        Args:
            user_id: Cognito sub

        Returns:
            list[dict]: Connection items
        """
        return list(
            self._paginate(
                "query",
                IndexName=self._user_index,
                KeyConditionExpression=Key("UserId").eq(user_id),
            )
        )
