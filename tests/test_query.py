import pytest

from quickpackage.content.query import (
    DescendantQuery,
    build_descendant_pattern,
    path_segments,
)


def test_pattern_quotes_each_segment_and_ends_with_wildcard():
    pattern = build_descendant_pattern("/sitecore/content/Home")
    assert pattern == "/#sitecore#/#content#/#Home#//*"


def test_pattern_is_deterministic():
    path = "/sitecore/content/Home/Page"
    assert build_descendant_pattern(path) == build_descendant_pattern(path)


def test_empty_segments_are_dropped():
    assert build_descendant_pattern("//sitecore///content/") == "/#sitecore#/#content#//*"


def test_segments_with_query_syntax_are_literal_tokens():
    pattern = build_descendant_pattern("/sitecore/content/and or-not")
    assert pattern == "/#sitecore#/#content#/#and or-not#//*"


def test_root_path_matches_everything():
    assert build_descendant_pattern("/") == "//*"
    assert build_descendant_pattern("") == "//*"


def test_none_path_is_rejected():
    with pytest.raises(ValueError):
        build_descendant_pattern(None)


def test_descendant_query_from_path():
    query = DescendantQuery.from_path("/sitecore//content/Home/", language="de")
    assert query.segments == ("sitecore", "content", "Home")
    assert query.base_path == "/sitecore/content/Home"
    assert query.language == "de"
    assert query.pattern == "/#sitecore#/#content#/#Home#//*"
    assert not query.is_root


def test_root_descendant_query():
    query = DescendantQuery.from_path("/")
    assert query.is_root
    assert path_segments("/") == ()
