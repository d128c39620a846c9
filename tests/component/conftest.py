"""In-memory DynamoDB double for component tests.

Covers the subset of the boto3 resource API the repositories call: conditional
put/update, get, delete, index queries with equality conditions, scan,
batch_writer and client.transact_write_items.
"""

import copy
import os
from collections.abc import Iterator
from contextlib import contextmanager
from types import SimpleNamespace
from typing import Any
from unittest.mock import patch

import pytest
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import ClientError

from menu_builder_service.dependencies import MenuServices, create_services


def client_error(
    code: str, operation: str, cancellation_reasons: list[str] | None = None
) -> ClientError:
    """Build the ClientError boto3 raises for a failed call."""
    response: dict[str, Any] = {"Error": {"Code": code, "Message": code}}
    if cancellation_reasons is not None:
        response["CancellationReasons"] = [{"Code": reason} for reason in cancellation_reasons]
    return ClientError(response, operation)


def check_serializable(values: dict[str, Any]) -> None:
    """Raise the TypeError boto3 raises for values DynamoDB cannot store, such as floats."""
    serializer = TypeSerializer()
    for value in values.values():
        serializer.serialize(value)


def matches(condition: Any, record: dict[str, Any]) -> bool:
    """Evaluate a boto3 Key/Attr condition built from eq and &."""
    expression = condition.get_expression()
    operator = expression["operator"]
    values = expression["values"]

    if operator == "AND":
        return all(matches(value, record) for value in values)
    if operator == "=":
        attribute, expected = values
        return bool(record.get(attribute.name) == expected)

    raise NotImplementedError(f"Unsupported condition operator {operator}")


class FakeTable:
    """Single DynamoDB table keyed by id."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.records: dict[str, dict[str, Any]] = {}

    def put_item(self, Item: dict[str, Any], ConditionExpression: str | None = None) -> None:
        check_serializable(Item)
        if ConditionExpression == "attribute_not_exists(id)" and Item["id"] in self.records:
            raise client_error("ConditionalCheckFailedException", "PutItem")
        self.records[Item["id"]] = copy.deepcopy(Item)

    def get_item(self, Key: dict[str, Any]) -> dict[str, Any]:
        record = self.records.get(Key["id"])
        return {} if record is None else {"Item": copy.deepcopy(record)}

    def delete_item(self, Key: dict[str, Any]) -> None:
        self.records.pop(Key["id"], None)

    def query(
        self,
        KeyConditionExpression: Any,
        IndexName: str = "",
        FilterExpression: Any = None,
        ScanIndexForward: bool = True,
        Limit: int | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        items = [r for r in self.records.values() if matches(KeyConditionExpression, r)]
        if "sort_order" in IndexName:
            items.sort(key=lambda r: r["sort_order"], reverse=not ScanIndexForward)
        if Limit is not None:
            items = items[:Limit]
        if FilterExpression is not None:
            items = [r for r in items if matches(FilterExpression, r)]
        return {"Items": copy.deepcopy(items)}

    def scan(self, **kwargs: Any) -> dict[str, Any]:
        return {"Items": copy.deepcopy(list(self.records.values()))}

    def update_item(
        self,
        Key: dict[str, Any],
        UpdateExpression: str,
        ExpressionAttributeNames: dict[str, str],
        ExpressionAttributeValues: dict[str, Any],
        ConditionExpression: str | None = None,
        ReturnValues: str = "NONE",
    ) -> dict[str, Any]:
        check_serializable(ExpressionAttributeValues)
        record = self.records.get(Key["id"])
        if record is None:
            raise client_error("ConditionalCheckFailedException", "UpdateItem")

        set_part, _, remove_part = UpdateExpression.partition(" REMOVE ")
        for clause in set_part.removeprefix("SET ").split(", "):
            name, value = clause.split(" = ")
            record[ExpressionAttributeNames[name]] = ExpressionAttributeValues[value]
        if remove_part:
            for name in remove_part.split(", "):
                record.pop(ExpressionAttributeNames[name], None)

        return {"Attributes": copy.deepcopy(record)}

    @contextmanager
    def batch_writer(self) -> Iterator[SimpleNamespace]:
        yield SimpleNamespace(delete_item=self.delete_item)


class FakeDynamoDB:
    """DynamoDB service resource holding FakeTables by name."""

    def __init__(self) -> None:
        self.tables: dict[str, FakeTable] = {}
        self.transactions: list[int] = []
        self.meta = SimpleNamespace(
            client=SimpleNamespace(transact_write_items=self.transact_write_items)
        )

    def Table(self, name: str) -> FakeTable:  # noqa: N802
        return self.tables.setdefault(name, FakeTable(name))

    def transact_write_items(self, TransactItems: list[dict[str, Any]]) -> None:
        """Apply all scoped sort_order updates, or none of them."""
        deserializer = TypeDeserializer()
        pending = []
        reasons = []

        for action in TransactItems:
            update = action["Update"]
            record = self.tables[update["TableName"]].records.get(
                deserializer.deserialize(update["Key"]["id"])
            )
            values = {
                key: deserializer.deserialize(value)
                for key, value in update["ExpressionAttributeValues"].items()
            }
            scope_attribute = update["ExpressionAttributeNames"]["#scope"]
            if record is None or record.get(scope_attribute) != values[":scope"]:
                reasons.append("ConditionalCheckFailed")
                continue
            reasons.append("None")
            pending.append((record, values[":sort_order"]))

        if len(pending) != len(TransactItems):
            raise client_error("TransactionCanceledException", "TransactWriteItems", reasons)

        for record, sort_order in pending:
            record["sort_order"] = sort_order
        self.transactions.append(len(TransactItems))


@pytest.fixture
def dynamodb() -> FakeDynamoDB:
    """Fixture providing an empty in-memory DynamoDB."""
    return FakeDynamoDB()


@pytest.fixture
def services(dynamodb: FakeDynamoDB) -> MenuServices:
    """Fixture providing real services wired to the in-memory DynamoDB."""
    with patch.dict(os.environ, {}, clear=True):
        return create_services(dynamodb)
