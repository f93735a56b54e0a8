"""Tests for pairwise similarity scoring."""

import itertools

import pytest

from feed_dedup.config import ScoringConfig
from feed_dedup.core.fingerprint import build_fingerprint
from feed_dedup.core.similarity import common_reasons, jaccard, score, title_similarity
from feed_dedup.core.types import ContentItem, SimilarityResult

PARK_BODY = "The Riverside City Council voted Tuesday to approve funding for a new park."

PARK = ContentItem(id="a", title="City Council Approves New Riverside Park", body=PARK_BODY)
PARK_PLAN = ContentItem(id="b", title="City Council Approves New Riverside Park Plan", body=PARK_BODY)
PARK_COPY = ContentItem(id="c", title="City Council Approves New Riverside Park", body=PARK_BODY)
UNRELATED = ContentItem(id="d", title="Alpha bravo charlie", body="")


def test_jaccard_basics():
    """Jaccard is intersection over union."""
    assert jaccard(["a"], ["a"]) == 1.0
    assert jaccard(["a", "b"], ["b", "c"]) == pytest.approx(1 / 3)


def test_jaccard_of_empty_sets_is_zero():
    """Two empty sets have similarity 0, not 1."""
    assert jaccard([], []) == 0.0
    assert title_similarity("", "") == 0.0


def test_identical_items_fire_every_signal():
    """Identical items collect every reason and a score of 1.0."""
    result = score(build_fingerprint(PARK), build_fingerprint(PARK_COPY))

    assert result.candidate_id == "c"
    assert result.score == pytest.approx(1.0)
    assert result.reasons == (
        "Similar titles",
        "Similar keywords",
        "Similar entities",
        "Content fingerprint match",
    )


def test_near_duplicate_titles_score_above_threshold():
    """Near-identical titles push a pair over the default threshold."""
    result = score(build_fingerprint(PARK), build_fingerprint(PARK_PLAN))

    assert result.score > 0.7
    assert result.reasons[0] == "Similar titles"
    assert "Content fingerprint match" not in result.reasons
    assert result.title == PARK_PLAN.title


def test_unrelated_items_score_zero():
    """Unrelated items score exactly zero with no reasons."""
    result = score(build_fingerprint(PARK), build_fingerprint(UNRELATED))

    assert result.score == 0
    assert result.reasons == ()


def test_score_is_symmetric():
    """Scoring is symmetric for every pair."""
    scenario_a = ContentItem(
        id="s1",
        title="City Council Approves New Park",
        body="The Riverside City Council voted...",
    )
    scenario_b = ContentItem(
        id="s2",
        title="Riverside Council Approves Park Project",
        body="City Council members voted to approve...",
    )
    fingerprints = [
        build_fingerprint(item)
        for item in (PARK, PARK_PLAN, PARK_COPY, UNRELATED, scenario_a, scenario_b)
    ]

    for first, second in itertools.combinations(fingerprints, 2):
        assert score(first, second).score == score(second, first).score
        assert score(first, second).reasons == score(second, first).reasons


def test_council_park_titles_share_three_of_seven_tokens():
    """The two council park titles have a title Jaccard of 3/7."""
    first = "City Council Approves New Park"
    second = "Riverside Council Approves Park Project"

    # council, approves, park shared; union of seven tokens
    assert title_similarity(first, second) == pytest.approx(3 / 7)


def test_custom_title_gate():
    """Scoring weights and gates come from the config."""
    first = build_fingerprint(ContentItem(id="s1", title="City Council Approves New Park"))
    second = build_fingerprint(ContentItem(id="s2", title="Riverside Council Approves Park Project"))

    assert "Similar titles" not in score(first, second).reasons
    relaxed = score(first, second, ScoringConfig(title_gate=0.4))
    assert "Similar titles" in relaxed.reasons


def test_similarity_labels():
    """Scores map to the Very Similar, Similar and Somewhat Similar labels."""
    def result(value):
        return SimilarityResult("x", value, (), "", "")

    assert result(0.85).label == "Very Similar"
    assert result(0.7).label == "Similar"
    assert result(0.6).label == "Somewhat Similar"


def test_common_reasons_keeps_reasons_seen_more_than_once():
    """Only reasons shared by several results are returned."""
    results = [
        SimilarityResult("x", 0.9, ("Similar titles", "Similar keywords"), "", ""),
        SimilarityResult("y", 0.8, ("Similar keywords", "Similar entities"), "", ""),
        SimilarityResult("z", 0.75, ("Similar keywords", "Similar entities"), "", ""),
    ]

    assert common_reasons(results) == ["Similar keywords", "Similar entities"]
    assert common_reasons([]) == []
