"""Unit tests for the pure core: identity keys, numbers, filters, sorting.

Covers:
- :func:`~rentease.core.ids.identity_key` and
  :func:`~rentease.core.ids.core_properties`.
- :func:`~rentease.core.numbers.parse_float` / ``sort_number``.
- :class:`~rentease.core.criteria.FilterCriteria` and
  :func:`~rentease.core.criteria.filter_flats`.
- :func:`~rentease.core.sorting.sort_flats` and
  :class:`~rentease.core.sorting.SortState`.
- :class:`~rentease.core.models.Flat` / :class:`~rentease.core.models.User`.
- :class:`~rentease.core.settings.Settings`.
"""

from __future__ import annotations

import logging
import math
from typing import Any

import pytest
from pydantic import ValidationError

from rentease.core.criteria import FilterCriteria, filter_flats
from rentease.core.exceptions import ConfigError
from rentease.core.ids import IDENTITY_FIELDS, core_properties, identity_key, same_flat
from rentease.core.models import Flat, User
from rentease.core.numbers import parse_float, sort_number
from rentease.core.settings import Settings, load_settings
from rentease.core.sorting import SortKey, SortOrder, SortState, sort_flats, sort_value

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Factories / helpers
# ---------------------------------------------------------------------------


def _make_flat(
    *,
    city: Any = "Kelowna",
    street: Any = "Bernard Ave",
    number: Any = "12",
    area: Any = "60",
    year_built: Any = "2005",
    price: Any = "1500",
    **extra: Any,
) -> dict[str, Any]:
    """Return a flat record with overridable defaults."""
    record: dict[str, Any] = {
        "city": city,
        "street": street,
        "number": number,
        "area": area,
        "ac": True,
        "yearBuilt": year_built,
        "price": price,
        "availableDate": "2026-11-01",
    }
    record.update(extra)
    return record


def _cities(records: list[dict[str, Any]]) -> list[Any]:
    return [record.get("city") for record in records]


# ===========================================================================
# Identity key
# ===========================================================================


class TestIdentityKey:
    def test_canonical_form(self) -> None:
        record = _make_flat(city="Vernon", street="Main", number="5", area="45", year_built="1999")
        assert identity_key(record) == (
            '{"city":"Vernon","street":"Main","number":"5","area":"45","yearBuilt":"1999"}'
        )

    def test_non_identity_fields_ignored(self) -> None:
        a = _make_flat(price="1500", isFavorite=True)
        b = _make_flat(price="9999", ac=False)
        assert identity_key(a) == identity_key(b)
        assert same_flat(a, b)

    def test_insertion_order_does_not_matter(self) -> None:
        record = _make_flat()
        shuffled = dict(reversed(list(record.items())))
        assert identity_key(shuffled) == identity_key(record)

    def test_case_and_whitespace_sensitive(self) -> None:
        assert identity_key(_make_flat(city="Kelowna")) != identity_key(_make_flat(city="kelowna"))
        assert identity_key(_make_flat(street="Main")) != identity_key(_make_flat(street="Main "))

    def test_type_sensitive(self) -> None:
        assert identity_key(_make_flat(area="60")) != identity_key(_make_flat(area=60))

    def test_integral_float_matches_integer(self) -> None:
        assert identity_key(_make_flat(area=60.0)) == identity_key(_make_flat(area=60))
        assert identity_key(_make_flat(area=60.5)) != identity_key(_make_flat(area=60))
        assert identity_key(_make_flat(area=60.0)) != identity_key(_make_flat(area="60"))
        assert identity_key(_make_flat(area=float("nan"))) == identity_key(_make_flat(area=None))

    def test_bool_is_not_a_number(self) -> None:
        assert identity_key(_make_flat(area=True)) != identity_key(_make_flat(area=1))

    def test_absent_field_is_omitted(self) -> None:
        record = _make_flat()
        del record["yearBuilt"]
        assert '"yearBuilt"' not in identity_key(record)
        assert list(core_properties(record)) == ["city", "street", "number", "area"]

    def test_absent_differs_from_null(self) -> None:
        absent = _make_flat()
        del absent["yearBuilt"]
        null = _make_flat(year_built=None)
        assert identity_key(absent) != identity_key(null)

    def test_two_absent_fields_match(self) -> None:
        a = {"city": "Vernon"}
        b = {"city": "Vernon", "price": "1"}
        assert same_flat(a, b)

    def test_non_mapping_has_empty_key(self) -> None:
        assert identity_key("garbage") == "{}"
        assert identity_key(None) == "{}"
        assert identity_key(42) == "{}"

    def test_non_ascii_kept_verbatim(self) -> None:
        assert "Montréal" in identity_key(_make_flat(city="Montréal"))

    def test_field_order_constant(self) -> None:
        assert IDENTITY_FIELDS == ("city", "street", "number", "area", "yearBuilt")


# ===========================================================================
# Numeric coercion
# ===========================================================================


class TestParseFloat:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("1500", 1500.0),
            (" 1500 ", 1500.0),
            ("1500 CAD", 1500.0),
            ("1.5e3", 1500.0),
            (".5", 0.5),
            ("-3", -3.0),
            (60, 60.0),
            (12.5, 12.5),
        ],
    )
    def test_parses_leading_number(self, value: object, expected: float) -> None:
        assert parse_float(value) == expected

    @pytest.mark.parametrize("value", ["", "abc", "CAD 1500", None, True, False, [], {}])
    def test_unparsable_is_none(self, value: object) -> None:
        assert parse_float(value) is None

    def test_nan_is_none(self) -> None:
        assert parse_float(float("nan")) is None

    def test_infinity(self) -> None:
        assert parse_float("Infinity") == math.inf
        assert parse_float("-Infinity") == -math.inf

    def test_sort_number_defaults_to_zero(self) -> None:
        assert sort_number("abc") == 0.0
        assert sort_number(None) == 0.0
        assert sort_number("42") == 42.0


# ===========================================================================
# Filter engine
# ===========================================================================


class TestFilterCriteria:
    def test_from_inputs_normalises(self) -> None:
        criteria = FilterCriteria.from_inputs(
            city="  KEL ", min_price="1000", max_price="", min_area="abc", max_area=80
        )
        assert criteria.city == "kel"
        assert criteria.min_price == 1000.0
        assert criteria.max_price is None
        assert criteria.min_area is None
        assert criteria.max_area == 80.0

    def test_blank_city_is_unset(self) -> None:
        assert FilterCriteria.from_inputs(city="   ").city is None
        assert FilterCriteria.from_inputs().is_empty

    def test_criteria_are_frozen(self) -> None:
        criteria = FilterCriteria(city="kel")
        with pytest.raises(ValidationError):
            criteria.city = "van"  # type: ignore[misc]

    def test_matches_reports_failed_criterion(self) -> None:
        criteria = FilterCriteria(min_price=2000)
        passed, reason = criteria.matches(_make_flat(price="1500"))
        assert passed is False
        assert "price" in reason
        assert criteria.matches(_make_flat(price="2500")) == (True, "")


class TestFilterFlats:
    def test_empty_criteria_returns_copy(self) -> None:
        records = [_make_flat(city="A"), _make_flat(city="B")]
        result = filter_flats(records, FilterCriteria())
        assert result == records
        assert result is not records

    def test_city_substring_case_insensitive(self) -> None:
        records = [_make_flat(city="Kelowna"), _make_flat(city="West Kelowna"), _make_flat(city="Vernon")]
        result = filter_flats(records, FilterCriteria.from_inputs(city="KELOWNA"))
        assert _cities(result) == ["Kelowna", "West Kelowna"]

    def test_missing_or_non_string_city_excluded_by_city_filter(self) -> None:
        no_city = _make_flat()
        del no_city["city"]
        records = [no_city, _make_flat(city=None), _make_flat(city=42), _make_flat(city="Kelowna")]
        result = filter_flats(records, FilterCriteria(city="kel"))
        assert _cities(result) == ["Kelowna"]

    def test_bounds_inclusive(self) -> None:
        records = [_make_flat(price=p) for p in ("999", "1000", "1500", "2000", "2001")]
        result = filter_flats(records, FilterCriteria(min_price=1000, max_price=2000))
        assert [r["price"] for r in result] == ["1000", "1500", "2000"]

    def test_unparsable_field_excluded_when_bound_active(self) -> None:
        records = [_make_flat(price="abc"), _make_flat(price="1200"), _make_flat(price=None)]
        result = filter_flats(records, FilterCriteria(max_price=5000))
        assert [r["price"] for r in result] == ["1200"]

    def test_unparsable_field_kept_without_bound(self) -> None:
        records = [_make_flat(price="abc")]
        assert filter_flats(records, FilterCriteria(min_area=10)) == records

    def test_area_bounds(self) -> None:
        records = [_make_flat(area="30"), _make_flat(area="60"), _make_flat(area="90")]
        result = filter_flats(records, FilterCriteria(min_area=50, max_area=70))
        assert [r["area"] for r in result] == ["60"]

    def test_inverted_bounds_match_nothing(self) -> None:
        records = [_make_flat(price="1500")]
        assert filter_flats(records, FilterCriteria(min_price=2000, max_price=1000)) == []

    def test_all_criteria_conjunctive(self) -> None:
        records = [
            _make_flat(city="Kelowna", price="1500", area="60"),
            _make_flat(city="Kelowna", price="900", area="60"),
            _make_flat(city="Vernon", price="1500", area="60"),
        ]
        criteria = FilterCriteria.from_inputs(city="kel", min_price="1000", min_area="50")
        assert filter_flats(records, criteria) == [records[0]]

    def test_subsequence_and_idempotent(self) -> None:
        records = [_make_flat(price=str(p)) for p in (500, 1500, 700, 2500, 1800)]
        criteria = FilterCriteria(min_price=1000)
        once = filter_flats(records, criteria)
        assert once == [r for r in records if float(r["price"]) >= 1000]
        assert filter_flats(once, criteria) == once

    def test_non_mapping_records_never_pass_a_filter(self) -> None:
        records = ["garbage", _make_flat()]
        assert filter_flats(records, FilterCriteria(city="kel")) == [records[1]]
        assert filter_flats(records, FilterCriteria()) == records


# ===========================================================================
# Sort engine
# ===========================================================================


class TestSortFlats:
    def test_no_sort_field_keeps_order(self) -> None:
        records = [_make_flat(city="B"), _make_flat(city="A")]
        assert sort_flats(records, None) == records

    def test_numeric_sort(self) -> None:
        records = [_make_flat(price=p) for p in ("1500", "900", "10000")]
        result = sort_flats(records, SortKey.PRICE)
        assert [r["price"] for r in result] == ["900", "1500", "10000"]

    def test_numeric_desc_is_reverse(self) -> None:
        records = [_make_flat(area=a) for a in ("45", "120", "60")]
        result = sort_flats(records, "area", SortOrder.DESC)
        assert [r["area"] for r in result] == ["120", "60", "45"]

    def test_unparsable_number_sorts_as_zero(self) -> None:
        records = [_make_flat(price="500"), _make_flat(price="abc"), _make_flat(price="-10")]
        result = sort_flats(records, "price")
        assert [r["price"] for r in result] == ["-10", "abc", "500"]

    def test_text_sort_case_insensitive(self) -> None:
        records = [_make_flat(city="vernon"), _make_flat(city="Kelowna"), _make_flat(city="abbotsford")]
        assert _cities(sort_flats(records, "city")) == ["abbotsford", "Kelowna", "vernon"]

    def test_missing_text_sorts_first(self) -> None:
        no_city = _make_flat()
        del no_city["city"]
        records = [_make_flat(city="Vernon"), no_city]
        assert sort_flats(records, "city")[0] is no_city

    def test_non_string_text_compares_as_string(self) -> None:
        records = [_make_flat(city="b"), _make_flat(city=10)]
        assert _cities(sort_flats(records, "city")) == [10, "b"]
        assert sort_value(_make_flat(city=10), "city") == "10"

    def test_stable_in_both_directions(self) -> None:
        records = [
            _make_flat(city="Kelowna", street="first"),
            _make_flat(city="Vernon", street="only"),
            _make_flat(city="kelowna", street="second"),
        ]
        asc = sort_flats(records, "city", SortOrder.ASC)
        desc = sort_flats(records, "city", SortOrder.DESC)
        assert [r["street"] for r in asc] == ["first", "second", "only"]
        assert [r["street"] for r in desc] == ["only", "first", "second"]

    def test_input_not_mutated(self) -> None:
        records = [_make_flat(price="2"), _make_flat(price="1")]
        snapshot = list(records)
        sort_flats(records, "price")
        assert records == snapshot


class TestSortState:
    def test_toggle_same_field_flips(self) -> None:
        state = SortState().toggle("price")
        assert (state.sort_by, state.order) == ("price", SortOrder.ASC)
        state = state.toggle("price")
        assert state.order == SortOrder.DESC
        assert state.toggle("price").order == SortOrder.ASC

    def test_toggle_other_field_resets_to_asc(self) -> None:
        state = SortState(sort_by="price", order=SortOrder.DESC).toggle("city")
        assert (state.sort_by, state.order) == ("city", SortOrder.ASC)

    def test_indicator(self) -> None:
        state = SortState(sort_by="area", order=SortOrder.DESC)
        assert state.indicator("area") == " ▼"
        assert state.indicator("city") == ""
        assert SortState(sort_by="area").indicator("area") == " ▲"

    def test_reset(self) -> None:
        assert SortState(sort_by="city", order=SortOrder.DESC).reset() == SortState()


# ===========================================================================
# Models
# ===========================================================================


class TestFlatModel:
    def test_to_record_uses_camel_case(self) -> None:
        flat = Flat(
            city="Kelowna",
            street="Bernard Ave",
            number=12,
            area=60,
            ac=True,
            yearBuilt=2005,
            price="1500",
            availableDate="2026-11-01",
        )
        assert flat.to_record() == {
            "city": "Kelowna",
            "street": "Bernard Ave",
            "number": "12",
            "area": "60",
            "ac": True,
            "yearBuilt": "2005",
            "price": "1500",
            "availableDate": "2026-11-01",
        }

    def test_snake_case_names_accepted(self) -> None:
        flat = Flat(
            city="Vernon",
            street="Main",
            number="5",
            area="45",
            year_built="1999",
            price="900",
            available_date="2026-12-01",
        )
        assert flat.year_built == "1999"
        assert "isFavorite" not in flat.to_record()

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("city", ""),
            ("price", "-1"),
            ("area", "abc"),
            ("yearBuilt", "99"),
            ("availableDate", "next week"),
        ],
    )
    def test_invalid_input_rejected(self, field: str, value: str) -> None:
        data = _make_flat()
        data[field] = value
        with pytest.raises(ValidationError):
            Flat.model_validate(data)


class TestUserModel:
    def test_valid_user(self) -> None:
        user = User(
            email="a@b.ca",
            password="abc12!",
            firstName="Ada",
            lastName="Lovelace",
            birthDate="1990-01-01",
        )
        assert user.to_record()["firstName"] == "Ada"

    def test_invalid_email(self) -> None:
        with pytest.raises(ValidationError):
            User(
                email="not-an-email",
                password="abc12!",
                firstName="Ada",
                lastName="Lovelace",
                birthDate="1990-01-01",
            )


# ===========================================================================
# Settings
# ===========================================================================


class TestSettings:
    def test_defaults(self, clean_env: None) -> None:
        settings = Settings()
        assert settings.database_path == "data/rentease.db"
        assert settings.cities_path == "data/bc-cities.json"
        assert settings.session_duration_minutes == 60
        assert settings.session_duration_ms == 3_600_000
        assert settings.log_level == "INFO"
        assert settings.log_format == "text"

    def test_env_override(self, clean_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SESSION_DURATION_MINUTES", "5")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_FORMAT", "JSON")
        settings = Settings()
        assert settings.session_duration_ms == 300_000
        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"

    def test_invalid_log_level(self, clean_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "VERBOSE")
        with pytest.raises(ValidationError):
            Settings()

    def test_load_settings_wraps_validation_error(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SESSION_DURATION_MINUTES", "0")
        with pytest.raises(ConfigError):
            load_settings()

    def test_resolved_paths_are_absolute(self, clean_env: None) -> None:
        settings = Settings()
        assert settings.database_path_resolved.is_absolute()
        assert settings.cities_path_resolved.name == "bc-cities.json"
