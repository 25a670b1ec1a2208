from __future__ import annotations

import pytest

from fitmedia.exceptions import FragmentError
from fitmedia.fragments import Fragment, matches_selector


@pytest.mark.parametrize(
    ("attrs", "selector", "expected"),
    [
        ({}, "img", True),
        ({}, "iframe, img", True),
        ({}, "video", False),
        ({"class": "hero wide"}, "img.hero", True),
        ({"class": "wide"}, "img.hero", False),
        ({"src": "a.png"}, 'img[src$=".png"]', True),
        ({}, "", False),
    ],
)
def test_matches_selector(attrs: dict[str, str], selector: str, expected: bool) -> None:
    assert matches_selector("img", attrs, selector) is expected


def test_matches_selector_rejects_invalid_selectors() -> None:
    with pytest.raises(FragmentError):
        matches_selector("img", {}, "img[")


def test_fragment_round_trip_keeps_unrelated_markup() -> None:
    fragment = Fragment.parse('<p class="x">Hi <img src="a.png"></p>')

    assert [tag.name for tag in fragment.select("img")] == ["img"]
    assert fragment.serialize() == '<p class="x">Hi <img src="a.png"/></p>'
