"""
Tests for models.py

Validate aspect ratio parsing and how search parameters are composed from a category and ad-hoc
tags.
"""

import dataclasses

import pytest

# following entities are tested in this module:
from wallfetch.models import AspectRatio
from wallfetch.models import Category
from wallfetch.models import SearchParameters
from wallfetch.models import compose_parameters


@pytest.mark.parametrize(
    ["value", "expected"],
    [
        ("16:9", AspectRatio(16, 9)),
        ("21x9", AspectRatio(21, 9)),
        ([4, 3], AspectRatio(4, 3)),
        ((1, 1), AspectRatio(1, 1)),
    ],
)
def test_aspect_ratio_parse(value, expected):
    assert AspectRatio.parse(value) == expected


@pytest.mark.parametrize("value", ["16/9", "16:9:1", "a:b", "0:9", [16], 169, None, "-4:3"])
def test_aspect_ratio_parse_failure(value):
    with pytest.raises(ValueError):
        AspectRatio.parse(value)


def test_aspect_ratio_str():
    assert str(AspectRatio(16, 9)) == "16:9"


@pytest.mark.parametrize("tags", [(), ("mountains",), ("a", "b", "a")])
def test_compose_without_category(tags):
    assert compose_parameters(None, tags) == SearchParameters(tags=tags, aspect_ratios=())


def test_compose_with_category_orders_tags():
    category = Category(
        "nature", tags=("landscape", "forest"), aspect_ratios=(AspectRatio(16, 9),)
    )

    params = compose_parameters(category, ["mountains", "forest"])

    assert params.tags == ("mountains", "forest", "landscape", "forest")
    assert params.aspect_ratios == (AspectRatio(16, 9),)


def test_compose_category_without_ratios():
    params = compose_parameters(Category("city", tags=("skyline",)), [])

    assert params.tags == ("skyline",)
    assert params.aspect_ratios == ()


def test_compose_accepts_generators():
    params = compose_parameters(Category("city", tags=("skyline",)), (t for t in ["night"]))

    assert params.tags == ("night", "skyline")


def test_search_parameters_immutable():
    params = compose_parameters(None, ["mountains"])

    with pytest.raises(dataclasses.FrozenInstanceError):
        params.tags = ()
