"""
tests/test_models.py

Domain defaults shared with the ORM, and the stanza row lock.
"""
from __future__ import annotations

import uuid

from sqlalchemy.dialects import postgresql, sqlite

from app.db.models import Poem as PoemModel
from app.db.repositories.poem_repository import poem_lock_query
from app.domains.poems.entities import DEFAULT_POEM_TITLE, Poem


def test_blank_titles_use_the_domain_default():
    owner_id = uuid.uuid4()
    assert Poem.create_poem(owner_id).title == DEFAULT_POEM_TITLE
    assert Poem.create_poem(owner_id, "   ").title == DEFAULT_POEM_TITLE
    assert Poem.create_poem(owner_id, "  Dusk ").title == "Dusk"


def test_column_default_matches_the_domain_default():
    assert PoemModel.__table__.c.title.default.arg == DEFAULT_POEM_TITLE


def test_new_poems_are_drafts():
    assert Poem.create_poem(uuid.uuid4()).is_draft is True


def test_stanza_changes_lock_the_poem_row_on_postgres():
    query = poem_lock_query(uuid.uuid4())

    assert "FOR UPDATE" in str(query.compile(dialect=postgresql.dialect()))
    # SQLite serializes writers itself and has no row locks
    assert "FOR UPDATE" not in str(query.compile(dialect=sqlite.dialect()))
