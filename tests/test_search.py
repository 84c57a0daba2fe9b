"""
tests/test_search.py

Snippet extraction and per-poem search annotation.
"""
from __future__ import annotations

import uuid

from app.domains.poems.entities import Poem, PoemAuthor, Stanza
from app.domains.poems.search import (
    annotate_poem,
    contains_ignore_case,
    extract_snippet,
    normalize_search_term,
)


def _poem(title: str, bodies: list[str], username: str = "bard") -> Poem:
    poem_id = uuid.uuid4()
    owner = PoemAuthor(id=uuid.uuid4(), username=username)
    return Poem(
        id=poem_id,
        owner_id=owner.id,
        title=title,
        is_draft=False,
        stanzas=[Stanza(id=uuid.uuid4(), poem_id=poem_id, body=b, position=i) for i, b in enumerate(bodies)],
        owner=owner,
    )


# ────────────────────────── extract_snippet ──────────────────────────
def test_short_body_keeps_whole_text():
    snippet, index = extract_snippet("The tide rises slowly each morning", "tide")
    assert snippet == "The tide rises slowly each morning"
    assert index == 4
    assert snippet[index:index + 4] == "tide"


def test_match_is_case_insensitive_but_snippet_keeps_case():
    snippet, index = extract_snippet("Under the MOON we danced", "moon")
    assert snippet[index:index + 4] == "MOON"


def test_far_match_gets_leading_ellipsis_and_shifted_index():
    body = "x" * 120 + "needle" + "y" * 10
    snippet, index = extract_snippet(body, "needle")

    assert snippet.startswith("...")
    assert not snippet.endswith("...")
    assert snippet[index:index + len("needle")] == "needle"
    # 50 chars of context plus the three dots in front of it
    assert index == 53


def test_long_tail_gets_trailing_ellipsis():
    body = "needle" + "z" * 200
    snippet, index = extract_snippet(body, "needle")

    assert index == 0
    assert snippet.endswith("...")
    assert snippet == "needle" + "z" * 50 + "..."


def test_window_is_clamped_on_both_sides():
    body = "a" * 80 + "Match" + "b" * 80
    snippet, index = extract_snippet(body, "match")

    assert snippet == "..." + "a" * 50 + "Match" + "b" * 50 + "..."
    assert snippet[index:index + 5] == "Match"


def test_first_occurrence_wins():
    snippet, index = extract_snippet("echo, echo, echo", "ECHO")
    assert index == 0


def test_no_match_or_empty_inputs():
    assert extract_snippet("nothing here", "absent") is None
    assert extract_snippet("", "tide") is None
    assert extract_snippet("some text", "") is None


# ────────────────────────── helpers ──────────────────────────
def test_normalize_search_term():
    assert normalize_search_term(None) is None
    assert normalize_search_term("   ") is None
    assert normalize_search_term("  tide ") == "tide"


def test_contains_ignore_case():
    assert contains_ignore_case("Ocean Waves", "WAVES")
    assert not contains_ignore_case("Ocean Waves", "tide")
    assert not contains_ignore_case(None, "tide")


# ────────────────────────── annotate_poem ──────────────────────────
def test_ocean_waves_example():
    poem = _poem("Ocean Waves", ["The tide rises slowly each morning"])
    matches = annotate_poem(poem, "tide")

    assert matches.title_match is False
    assert matches.username_match is None
    assert len(matches.matching_stanzas) == 1

    hit = matches.matching_stanzas[0]
    assert hit.id == poem.stanzas[0].id
    assert hit.position == 0
    assert "tide" in hit.snippet
    assert hit.snippet[hit.match_index:hit.match_index + 4] == "tide"


def test_non_matching_stanzas_are_omitted():
    poem = _poem("Seasons", ["winter frost", "spring rain", "summer rain", ""])
    matches = annotate_poem(poem, "rain")

    assert [m.position for m in matches.matching_stanzas] == [1, 2]


def test_username_match_only_when_requested():
    poem = _poem("Untitled Poem", ["line"], username="RainMaker")

    assert annotate_poem(poem, "rain", include_username=True).username_match is True
    assert annotate_poem(poem, "rain").username_match is None
    assert annotate_poem(poem, "snow", include_username=True).username_match is False


def test_title_match():
    poem = _poem("Rain on the Roof", [])
    matches = annotate_poem(poem, "ROOF")
    assert matches.title_match is True
    assert matches.matching_stanzas == []


def test_index_is_taken_from_the_original_text():
    # "İ".lower() is two code points, so lowered offsets would drift
    snippet, index = extract_snippet("İİİ the tide", "tide")
    assert snippet == "İİİ the tide"
    assert snippet[index:index + 4] == "tide"


def test_shifted_case_folding_inside_a_long_window():
    body = "İ" * 70 + " tide " + "z" * 60
    snippet, index = extract_snippet(body, "TIDE")

    assert snippet.startswith("...")
    assert snippet.endswith("...")
    assert snippet[index:index + 4] == "tide"
