"""Tests for record encoding and decoding."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from bopp.exceptions import StorageError
from bopp.models import AdminUser, EmployeeUser, Rate, RateHistoryEntry
from bopp.storage.codec import (
    decode_decimal,
    decode_timestamp,
    history_from_record,
    history_to_record,
    user_from_record,
    user_to_record,
)


def _no_hash(password: str) -> str:
    return f"hashed:{password}"


class TestScalars:
    def test_decimal_from_number_avoids_float_artifacts(self) -> None:
        assert decode_decimal(0.1) == Decimal("0.1")
        assert decode_decimal("118.0000") == Decimal("118.0000")

    def test_invalid_decimal(self) -> None:
        with pytest.raises(StorageError):
            decode_decimal("eighty")

    def test_javascript_iso_timestamp(self) -> None:
        parsed = decode_timestamp("2024-05-01T10:15:00.000Z")
        assert parsed == datetime(2024, 5, 1, 10, 15, tzinfo=timezone.utc)

    def test_naive_timestamp_assumed_utc(self) -> None:
        assert decode_timestamp("2024-05-01T10:15:00").tzinfo == timezone.utc


class TestHistory:
    def test_encodes_iso_and_decimal_strings(self) -> None:
        entry = RateHistoryEntry(
            id=4,
            changed_at=datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            changed_by_id="admin",
            changed_by_name="Administrator",
            rates_snapshot=(Rate(id=13, key="profit", value=Decimal("10")),),
        )

        record = history_to_record(entry)

        assert record["changed_at"] == "2025-01-02T03:04:05+00:00"
        assert record["rates_snapshot"] == [{"id": 13, "key": "profit", "value": "10"}]
        assert history_from_record(record) == entry

    def test_non_list_snapshot_decodes_empty(self) -> None:
        entry = history_from_record({
            "id": 1,
            "changed_at": "2025-01-02T03:04:05Z",
            "changed_by_id": "x",
            "changed_by_name": "X",
            "rates_snapshot": None,
        })

        assert entry.rates_snapshot == ()

    def test_missing_field_raises(self) -> None:
        with pytest.raises(StorageError):
            history_from_record({"id": 1})

    @pytest.mark.parametrize("record", ["oops", None, 7, [1, 2]])
    def test_non_dict_record_raises(self, record) -> None:
        with pytest.raises(StorageError):
            history_from_record(record)


class TestUsers:
    def test_employee_without_otp(self) -> None:
        user = user_from_record({"id": "emp001", "name": "Alice", "role": "employee"}, _no_hash)

        assert user == EmployeeUser(id="emp001", name="Alice")

    def test_employee_otp_round_trip(self) -> None:
        created = datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)
        user = EmployeeUser(id="emp001", name="Alice", otp="123456", otp_created_at=created)

        assert user_from_record(user_to_record(user), _no_hash) == user

    def test_admin_plaintext_password_is_hashed(self) -> None:
        user = user_from_record(
            {"id": "adm9", "name": "A", "role": "admin", "password": "pw"}, _no_hash
        )

        assert user == AdminUser(id="adm9", name="A", password_hash="hashed:pw")
        assert "password" not in user_to_record(user)

    def test_employee_password_is_dropped(self) -> None:
        user = user_from_record(
            {"id": "e", "name": "E", "role": "employee", "password": "pw"}, _no_hash
        )

        assert "password" not in user_to_record(user)
        assert "password_hash" not in user_to_record(user)

    def test_unknown_role_raises(self) -> None:
        with pytest.raises(StorageError):
            user_from_record({"id": "x", "name": "X", "role": "manager"}, _no_hash)

    @pytest.mark.parametrize("record", [None, "admin", 3, ["admin"]])
    def test_non_dict_record_raises(self, record) -> None:
        with pytest.raises(StorageError):
            user_from_record(record, _no_hash)

    def test_non_string_role_raises(self) -> None:
        with pytest.raises(StorageError):
            user_from_record({"id": "x", "name": "X", "role": ["admin"]}, _no_hash)
