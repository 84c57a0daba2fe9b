from app.domains.poems.audience import (
    Audience, OwnPoems, AllPoems, FeedPoems, UserPoems, PoemFilter, build_filter
)
from app.domains.poems.entities import DEFAULT_POEM_TITLE, Poem, PoemAuthor, Stanza
from app.domains.poems.pagination import Page, PageRequest, parse_limit
from app.domains.poems.search import SearchMatches, StanzaMatch, annotate_poem, extract_snippet

__all__ = [
    "Audience", "OwnPoems", "AllPoems", "FeedPoems", "UserPoems", "PoemFilter", "build_filter",
    "DEFAULT_POEM_TITLE", "Poem", "PoemAuthor", "Stanza",
    "Page", "PageRequest", "parse_limit",
    "SearchMatches", "StanzaMatch", "annotate_poem", "extract_snippet"
]
