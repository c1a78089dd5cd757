"""Tests for repository exceptions."""

from __future__ import annotations

import pytest

from demo_service.core.database import NotFoundError, RepositoryError


@pytest.mark.unit
class TestRepositoryError:
    """Test suite for RepositoryError."""

    def test_message_only(self):
        err = RepositoryError("boom")

        assert str(err) == "boom"
        assert err.details == {}

    def test_message_with_details(self):
        err = RepositoryError("boom", {"table": "users"})

        assert str(err) == "boom (table='users')"
        assert err.details == {"table": "users"}


@pytest.mark.unit
class TestNotFoundError:
    """Test suite for NotFoundError."""

    def test_message_and_attributes(self):
        err = NotFoundError("User", {"id": 5})

        assert isinstance(err, RepositoryError)
        assert err.message == "User not found with id=5"
        assert err.model_name == "User"
        assert err.identifier == {"id": 5}
        assert err.details == {"model": "User", "id": 5}

    def test_repr(self):
        err = NotFoundError("User", {"username": "alice"})

        assert repr(err) == "NotFoundError(model='User', identifier={'username': 'alice'})"
