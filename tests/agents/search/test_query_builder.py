"""Tests for keyword query construction."""

import pytest

from claim_verifier.agents.search.query_builder import MAX_QUERY_TERMS, build_search_query


@pytest.mark.parametrize(
    "claim, expected",
    [
        ("Drinking hot water cures COVID-19!", "drinking hot water cures covid"),
        ("The vaccine is dangerous and has been banned", "vaccine dangerous banned"),
        ("5G towers spread the coronavirus", "towers spread coronavirus"),
        ("It is what it is", "what"),
        ("", ""),
        ("a an the is of", ""),
    ],
)
def test_build_search_query(claim, expected):
    assert build_search_query(claim) == expected


def test_keeps_first_seven_terms_in_order():
    claim = "alpha bravo charlie delta echo foxtrot golf hotel india"

    query = build_search_query(claim)

    assert query.split() == ["alpha", "bravo", "charlie", "delta", "echo", "foxtrot", "golf"]
    assert len(query.split()) == MAX_QUERY_TERMS


def test_punctuation_splits_words():
    assert build_search_query("WHO's report: masks-work") == "who report masks work"
