"""Tests for property name humanizing."""

import pytest

from missingrefs.naming import nicify_variable_name


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("targetTransform", "Target Transform"),
        ("m_targetTransform", "Target Transform"),
        ("_speed", "Speed"),
        ("kMaxCount", "Max Count"),
        ("HTTPServer", "HTTP Server"),
        ("slot2", "Slot 2"),
        ("lods[0]", "Lods[0]"),
        ("spawn_point", "Spawn point"),
        ("target", "Target"),
        ("", ""),
    ],
)
def test_nicify_variable_name(raw, expected):
    assert nicify_variable_name(raw) == expected
