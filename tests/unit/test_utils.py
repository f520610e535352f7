"""Unit tests for shared helpers."""

import pytest

from app.utils import create_slug, get_logger


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Acme Inc (Admin)", "acme-inc-admin"),
        ("  Spaced   out  ", "spaced-out"),
        ("Café Déjà Vu", "cafe-deja-vu"),
        ("already-a-slug", "already-a-slug"),
        ("snake_case name", "snakecase-name"),
        ("!!!", ""),
    ],
)
def test_create_slug(text: str, expected: str) -> None:
    assert create_slug(text) == expected


def test_get_logger_namespaces_under_app() -> None:
    assert get_logger("app.features.x").name == "app.features.x"
    assert get_logger("scripts.seed").name == "app.scripts.seed"
