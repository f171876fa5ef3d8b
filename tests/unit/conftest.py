"""Shared entity fixtures for binder unit tests."""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import BaseModel

from entity_binder.runtime.binder import RecordBinder
from entity_binder.specs.entity import (
    EntitySpec,
    FieldType,
    FileFieldConfig,
    FileStorage,
    NameCreation,
    PropertySpec,
    ScalarType,
    scalar,
)


class Order(BaseModel):
    Id: int = 0
    CustomerId: int | None = None
    Total: Decimal = Decimal("0")
    Version: int = 0
    CreatedAt: object | None = None
    Status: str | None = None


class Document(BaseModel):
    Id: int = 0
    Title: str = ""
    Attachment: object | None = None
    Scan: object | None = None


@pytest.fixture
def binder() -> RecordBinder:
    return RecordBinder()


@pytest.fixture
def order_entity() -> EntitySpec:
    return EntitySpec(
        name="Order",
        target=Order,
        properties=[
            PropertySpec(name="Id", type=scalar(ScalarType.INT), is_key=True),
            PropertySpec(name="CustomerId", type=scalar(ScalarType.INT), foreign_key="Customer"),
            PropertySpec(name="Total", type=scalar(ScalarType.DECIMAL)),
            PropertySpec(name="Version", type=scalar(ScalarType.INT), is_concurrency_check=True),
        ],
    )


@pytest.fixture
def rich_order_entity() -> EntitySpec:
    """Order with a navigation property, a multi-valued foreign key and defaults."""
    return EntitySpec(
        name="Order",
        target=Order,
        properties=[
            PropertySpec(name="Id", type=scalar(ScalarType.INT), is_key=True),
            PropertySpec(name="CustomerId", type=scalar(ScalarType.INT), foreign_key="Customer"),
            PropertySpec(
                name="Customer",
                type=FieldType(kind="ref", ref_entity="Customer"),
                foreign_key="Customer",
            ),
            PropertySpec(
                name="Tags",
                type=FieldType(kind="ref", ref_entity="Tag", many=True),
                foreign_key="Tag",
            ),
            PropertySpec(name="Total", type=scalar(ScalarType.DECIMAL)),
            PropertySpec(name="CreatedAt", type=scalar(ScalarType.DATETIME)),
            PropertySpec(name="Status", type=scalar(ScalarType.STR)),
        ],
    )


@pytest.fixture
def document_entity() -> EntitySpec:
    return EntitySpec(
        name="Document",
        target=Document,
        properties=[
            PropertySpec(name="Id", type=scalar(ScalarType.INT), is_key=True),
            PropertySpec(name="Title", type=scalar(ScalarType.STR)),
            PropertySpec(
                name="Attachment",
                type=scalar(ScalarType.FILE),
                file=FileFieldConfig(
                    storage=FileStorage.FILESYSTEM,
                    name_creation=NameCreation.USER_INPUT,
                ),
            ),
            PropertySpec(
                name="Scan",
                type=scalar(ScalarType.IMAGE),
                file=FileFieldConfig(storage=FileStorage.DATABASE),
            ),
        ],
    )
