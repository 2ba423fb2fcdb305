"""Pytest configuration and fixtures for dataknobs_validation tests."""

import sys
from dataclasses import dataclass, field as dataclass_field
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@dataclass
class User:
    """Record type shared by the schema tests."""

    first_name: str
    last_name: str
    status: str = "active"
    age: int = 30
    birth_date: str = "1990-01-01"
    email: str = "john@doe.com"
    hobbies: list[str] = dataclass_field(default_factory=list)
    children: list["User"] = dataclass_field(default_factory=list)


@pytest.fixture
def user_type():
    """The dataclass used as a record type."""
    return User


@pytest.fixture
def john():
    """A user that passes the kitchen sink schema."""
    return User(
        first_name="John",
        last_name="Doe",
        hobbies=["reading", "coding"],
        children=[User(first_name="Jane", last_name="Doe", age=5, hobbies=[])],
    )
