"""
Unit tests for the local orchestrator.
"""
import json
import os
import shutil
import tempfile
from unittest.mock import MagicMock

import pytest

from src.errors import TransportError, ValidationError
from src.models import ArticleState
from src.orchestrator import apply, destroy, load_desired, load_state, refresh, save_state


class FakeResource:
    """In-memory stand-in for ArticleResource."""

    def __init__(self):
        self.remote = {}
        self.calls = []
        self._next = 1

    def create(self, state):
        self.calls.append(("create", state.heading))
        article_id = str(self._next)
        self._next += 1
        self.remote[article_id] = ArticleState(state.heading, state.description, list(state.tags), article_id)
        state.id = article_id
        return article_id

    def read(self, state):
        self.calls.append(("read", state.id))
        remote = self.remote.get(state.id)
        if remote is None:
            state.id = None
            return state
        state.heading, state.description, state.tags = remote.heading, remote.description, list(remote.tags)
        return state

    def update(self, state, desired):
        self.calls.append(("update", state.id))
        self.remote[state.id] = ArticleState(desired.heading, desired.description, list(desired.tags), state.id)
        self.read(state)

    def delete(self, state):
        self.calls.append(("delete", state.id))
        self.remote.pop(state.id, None)
        state.id = None


class TestOrchestrator:
    """Test suite for apply, refresh and destroy."""

    @pytest.fixture
    def temp_dir(self):
        """Create a temporary directory for state files."""
        temp_dir = tempfile.mkdtemp()
        yield temp_dir
        shutil.rmtree(temp_dir)

    @pytest.fixture
    def resource(self):
        """Create a fake resource."""
        return FakeResource()

    def _desired(self, **articles):
        return {name: ArticleState(heading, "desc", [name]) for name, heading in articles.items()}

    def test_apply_creates_absent_articles(self, resource):
        """Test that undeclared state leads to creates."""
        state = {}
        changes = apply(resource, self._desired(first="One", second="Two"), state)

        assert changes == [("create", "first"), ("create", "second")]
        assert state["first"].is_bound and state["second"].is_bound
        assert len(resource.remote) == 2

    def test_apply_is_idempotent(self, resource):
        """Test that a converged state produces no changes."""
        desired = self._desired(first="One")
        state = {}
        apply(resource, desired, state)

        assert apply(resource, desired, state) == []
        assert len(resource.remote) == 1

    def test_apply_updates_drifted_article(self, resource):
        """Test that remote drift is corrected."""
        desired = self._desired(first="One")
        state = {}
        apply(resource, desired, state)
        resource.remote[state["first"].id].heading = "Edited remotely"

        changes = apply(resource, desired, state)

        assert changes == [("update", "first")]
        assert state["first"].heading == "One"

    def test_apply_recreates_externally_deleted_article(self, resource):
        """Test that an article gone from the server is created again."""
        desired = self._desired(first="One")
        state = {}
        apply(resource, desired, state)
        resource.remote.clear()

        assert apply(resource, desired, state) == [("create", "first")]
        assert state["first"].is_bound

    def test_apply_deletes_undeclared_articles(self, resource):
        """Test that articles removed from the declaration are deleted."""
        state = {}
        apply(resource, self._desired(first="One", second="Two"), state)

        changes = apply(resource, self._desired(first="One"), state)

        assert changes == [("delete", "second")]
        assert list(state) == ["first"]

    def test_apply_keeps_progress_on_failure(self):
        """Test that the state mapping records work done before an error."""
        def create(state):
            if state.heading != "One":
                raise TransportError("refused")
            state.id = "1"
            return "1"

        resource = MagicMock()
        resource.create.side_effect = create

        state = {}
        with pytest.raises(TransportError):
            apply(resource, self._desired(first="One", second="Two"), state)

        assert state["first"].id == "1"
        assert not state["second"].is_bound

    def test_refresh_drops_missing(self, resource):
        """Test that refresh forgets articles the server no longer has."""
        state = {}
        apply(resource, self._desired(first="One", second="Two"), state)
        del resource.remote[state["second"].id]

        assert refresh(resource, state) == ["second"]
        assert list(state) == ["first"]

    def test_destroy_deletes_everything(self, resource):
        """Test that destroy removes all recorded articles."""
        state = {}
        apply(resource, self._desired(first="One", second="Two"), state)

        assert sorted(destroy(resource, state)) == ["first", "second"]
        assert state == {}
        assert resource.remote == {}

    # ================== FILES ==================

    def test_state_round_trip(self, temp_dir):
        """Test saving and loading state records."""
        path = os.path.join(temp_dir, "nested", "state.json")
        save_state(path, {"first": ArticleState("One", "desc", ["a"], "12")})

        loaded = load_state(path)

        assert loaded == {"first": ArticleState("One", "desc", ["a"], "12")}
        with open(path, encoding="utf-8") as f:
            assert "updated_at" in json.load(f)

    def test_load_state_missing_file(self, temp_dir):
        """Test that a missing state file means nothing is managed."""
        assert load_state(os.path.join(temp_dir, "none.json")) == {}

    def test_load_desired(self, temp_dir):
        """Test parsing a declaration file."""
        path = os.path.join(temp_dir, "articles.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"articles": {"first": {"heading": "One", "description": "d", "tags": ["x"]}}}, f)

        assert load_desired(path) == {"first": ArticleState("One", "d", ["x"])}

    def test_load_desired_rejects_bad_tags(self, temp_dir):
        """Test that a malformed declaration names the offending article."""
        path = os.path.join(temp_dir, "articles.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"articles": {"first": {"heading": "One", "description": "d", "tags": "x"}}}, f)

        with pytest.raises(ValidationError, match="article 'first'"):
            load_desired(path)

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"articles": []}', '{"articles": {"a": 3}}'])
    def test_load_state_rejects_malformed_file(self, temp_dir, content):
        """Test that a corrupt state file is a ValidationError naming the file."""
        path = os.path.join(temp_dir, "state.json")
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)

        with pytest.raises(ValidationError, match="state.json"):
            load_state(path)

    def test_load_state_normalizes_numeric_id(self, temp_dir):
        """Test that an integer id in the state file is read back as a string."""
        path = os.path.join(temp_dir, "state.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"articles": {"a": {"id": 12, "heading": "A", "description": "", "tags": []}}}, f)

        assert load_state(path)["a"].id == "12"

    @pytest.mark.parametrize("content", ["{not json", '"just a string"', '{"articles": ["a"]}'])
    def test_load_desired_rejects_malformed_file(self, temp_dir, content):
        """Test that a corrupt declaration file is a ValidationError naming the file."""
        path = os.path.join(temp_dir, "articles.json")
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)

        with pytest.raises(ValidationError, match="articles.json"):
            load_desired(path)

    def test_load_desired_missing_file(self, temp_dir):
        """Test that a missing declaration file is reported."""
        with pytest.raises(ValidationError, match="not found"):
            load_desired(os.path.join(temp_dir, "missing.json"))
