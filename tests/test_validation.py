from __future__ import annotations

import math

import pytest

from map_realtime.realtime.validation import Rejection, validate_join, validate_update


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"name": "Bob"}, "Bob"),
        ({"name": "  Bob  "}, "Bob"),
        ({"name": "a" * 64}, "a" * 64),
        ({"name": "\t" + "a" * 64 + " "}, "a" * 64),
        ({"type": "join", "name": "Bob", "extra": 1}, "Bob"),
    ],
)
def test_valid_join(payload, expected) -> None:
    data, outcome = validate_join(payload)
    assert outcome.accepted
    assert data.name == expected


@pytest.mark.parametrize(
    "payload",
    [
        {"name": ""},
        {"name": "   "},
        {"name": "a" * 65},
        {"name": 42},
        {"name": None},
        {},
        "Bob",
        None,
    ],
)
def test_invalid_join(payload) -> None:
    data, outcome = validate_join(payload)
    assert data is None
    assert not outcome.accepted
    assert outcome.reason is Rejection.INVALID_PAYLOAD


@pytest.mark.parametrize(
    "payload",
    [
        {"lat": 10, "lng": 20},
        {"lat": -90, "lng": -180},
        {"lat": 90.0, "lng": 180.0},
        {"lat": 0.000001, "lng": -0.5},
    ],
)
def test_valid_update(payload) -> None:
    data, outcome = validate_update(payload)
    assert outcome.accepted
    assert (data.lat, data.lng) == (payload["lat"], payload["lng"])


@pytest.mark.parametrize(
    "payload",
    [
        {"lat": 91, "lng": 0},
        {"lat": -90.5, "lng": 0},
        {"lat": 0, "lng": 181},
        {"lat": 0, "lng": -180.01},
        {"lat": "10", "lng": "20"},
        {"lat": True, "lng": 0},
        {"lat": math.nan, "lng": 0},
        {"lat": 0, "lng": math.inf},
        {"lat": 10},
        [10, 20],
    ],
)
def test_invalid_update(payload) -> None:
    data, outcome = validate_update(payload)
    assert data is None
    assert outcome.reason is Rejection.INVALID_PAYLOAD
    assert outcome.detail


def test_rejection_detail_names_the_field() -> None:
    _, outcome = validate_update({"lat": 91, "lng": 0})
    assert outcome.detail == "lat"


def test_name_length_counts_code_points() -> None:
    # 64 astral characters are 128 UTF-16 code units but 64 characters.
    data, outcome = validate_join({"name": "\U0001F600" * 64})
    assert outcome.accepted
    assert len(data.name) == 64

    _, outcome = validate_join({"name": "\U0001F600" * 65})
    assert outcome.reason is Rejection.INVALID_PAYLOAD
