"""Tests for notes endpoints."""

import json

from api.exceptions import ServiceError
from api.models import NoteContent
from api.services import NOTES_KEY, PREFERENCES_KEY


class TestListNotes:
    """Test the projected note list."""

    def test_fresh_store_lists_seed_notes(self, api_client):
        """Test that a new data directory starts with the Gujarati seed notes."""
        response = api_client.get("/notes")

        assert response.status_code == 200
        data = response.json()
        assert data["language"] == "gu"
        assert data["total"] == 3
        # Pinned first, then most recently updated
        assert [note["id"] for note in data["notes"]] == ["1", "2", "3"]
        assert data["notes"][0]["isPinned"] is True
        assert data["notes"][0]["availableLanguages"] == ["gu"]

    def test_other_language_hides_notes(self, api_client):
        """Test that notes without the requested language are not listed."""
        response = api_client.get("/notes", params={"language": "en"})

        assert response.status_code == 200
        assert response.json()["notes"] == []

    def test_search(self, api_client):
        """Test filtering by title or body."""
        response = api_client.get("/notes", params={"q": "દૂધ"})

        assert [note["id"] for note in response.json()["notes"]] == ["2"]

    def test_unknown_language(self, api_client):
        """Test that unsupported language codes are rejected."""
        response = api_client.get("/notes", params={"language": "fr"})

        assert response.status_code == 422


class TestCreateNote:
    """Test creating notes."""

    def test_create_note(self, api_client, sample_note_data):
        """Test creating a note in the active language."""
        response = api_client.post("/notes", json=sample_note_data)

        assert response.status_code == 201
        data = response.json()
        assert data["content"] == {"gu": {"title": "Test Note", "body": "This is a test note body."}}
        assert data["color"] == "#FFC0CB"
        assert data["isPinned"] is False
        assert data["createdAt"] == data["updatedAt"]
        assert "id" in data

    def test_new_note_listed_after_pinned(self, api_client, sample_note_data):
        """Test that a new unpinned note sorts after pinned ones but before older notes."""
        created = api_client.post("/notes", json=sample_note_data).json()

        ids = [note["id"] for note in api_client.get("/notes").json()["notes"]]

        assert ids == ["1", created["id"], "2", "3"]

    def test_create_persists(self, api_client, sample_note_data, tmp_path):
        """Test that the collection is written to the data directory."""
        created = api_client.post("/notes", json=sample_note_data).json()

        stored = json.loads((tmp_path / "notes.json").read_text(encoding="utf-8"))
        assert stored[0]["id"] == created["id"]

    def test_create_requires_title(self, api_client):
        """Test request validation."""
        response = api_client.post("/notes", json={"title": "", "body": "text"})

        assert response.status_code == 422

    def test_title_too_long(self, api_client):
        """Test the title length limit."""
        response = api_client.post("/notes", json={"title": "x" * 101, "body": "text"})

        assert response.status_code == 422


class TestGetUpdateDelete:
    """Test reading, editing and deleting a note."""

    def test_get_note(self, api_client):
        """Test fetching a note with all languages."""
        response = api_client.get("/notes/2")

        assert response.status_code == 200
        assert set(response.json()["content"]) == {"gu"}

    def test_get_missing_note(self, api_client):
        """Test that unknown ids return 404 with an error code."""
        response = api_client.get("/notes/missing")

        assert response.status_code == 404
        assert response.json()["code"] == "NOTE_NOT_FOUND"

    def test_update_note(self, api_client):
        """Test saving edits to the active-language content."""
        response = api_client.put(
            "/notes/3", json={"title": "નવું શીર્ષક", "body": "નવું લખાણ", "color": "#C1D1FF"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["content"]["gu"] == {"title": "નવું શીર્ષક", "body": "નવું લખાણ"}
        assert data["color"] == "#C1D1FF"
        assert data["updatedAt"] > data["createdAt"]

    def test_update_missing_note(self, api_client, note_store):
        """Test that editing an unknown id is a 404 and changes nothing."""
        before = note_store.notes

        response = api_client.put("/notes/missing", json={"title": "a", "body": "b"})

        assert response.status_code == 404
        assert note_store.notes == before

    def test_delete_note(self, api_client):
        """Test deleting a note."""
        response = api_client.delete("/notes/2")

        assert response.status_code == 204
        assert api_client.get("/notes/2").status_code == 404

    def test_delete_is_idempotent(self, api_client):
        """Test that deleting a missing note also succeeds."""
        api_client.delete("/notes/2")

        response = api_client.delete("/notes/2")

        assert response.status_code == 204
        assert api_client.get("/notes").json()["total"] == 2

    def test_toggle_pin(self, api_client):
        """Test pinning an unpinned note moves it into the pinned group."""
        before = api_client.get("/notes/3").json()

        response = api_client.post("/notes/3/pin")

        assert response.status_code == 200
        assert response.json()["isPinned"] is True
        assert response.json()["updatedAt"] == before["updatedAt"]
        ids = [note["id"] for note in api_client.get("/notes").json()["notes"]]
        assert ids == ["1", "3", "2"]

    def test_toggle_pin_missing(self, api_client):
        """Test pinning an unknown note."""
        assert api_client.post("/notes/missing/pin").status_code == 404


class TestTranslateNote:
    """Test translating a stored note."""

    def test_translate_merges_language(self, api_client, fake_gateway):
        """Test that the translation is added alongside the original."""
        response = api_client.post("/notes/2/translate", json={"targetLanguage": "en"})

        assert response.status_code == 200
        content = response.json()["content"]
        assert set(content) == {"gu", "en"}
        assert content["en"] == {"title": "Shopping", "body": "Bring milk and bread"}

        title, body, target = fake_gateway.translate.call_args.args
        assert title == "ખરીદીની યાદી"
        assert target.value == "en"

        listed = api_client.get("/notes", params={"language": "en"}).json()
        assert [note["id"] for note in listed["notes"]] == ["2"]

    def test_translate_existing_language_skips_model(self, api_client, fake_gateway):
        """Test that an existing language is returned without calling the model."""
        response = api_client.post("/notes/2/translate", json={"targetLanguage": "gu"})

        assert response.status_code == 200
        fake_gateway.translate.assert_not_called()

    def test_translate_missing_source_language(self, api_client):
        """Test that a requested source language the note lacks is rejected."""
        response = api_client.post(
            "/notes/2/translate", json={"targetLanguage": "en", "sourceLanguage": "hi"}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VAL_VALIDATION_ERROR"

    def test_translate_deleted_during_request(self, api_client, fake_gateway, note_store):
        """Test that a translation finishing after delete is discarded."""

        async def delete_then_translate(title, body, target):
            note_store.delete("2")
            return NoteContent(title="Shopping", body="Milk")

        fake_gateway.translate.side_effect = delete_then_translate

        response = api_client.post("/notes/2/translate", json={"targetLanguage": "en"})

        assert response.status_code == 404
        assert note_store.get("2") is None

    def test_translate_service_failure(self, api_client, fake_gateway, note_store):
        """Test that AI failures leave the note unchanged."""
        fake_gateway.translate.side_effect = ServiceError("model unavailable")
        before = note_store.get("2")

        response = api_client.post("/notes/2/translate", json={"targetLanguage": "hi"})

        assert response.status_code == 502
        assert response.json() == {"detail": "model unavailable", "code": "EXT_SERVICE_ERROR"}
        assert note_store.get("2") == before

    def test_translate_missing_note(self, api_client):
        """Test translating an unknown note."""
        response = api_client.post("/notes/missing/translate", json={"targetLanguage": "en"})

        assert response.status_code == 404


class TestSummarizeNote:
    """Test summarizing a stored note."""

    def test_summarize_note(self, api_client, fake_gateway):
        """Test summarizing the active-language body."""
        response = api_client.post("/notes/1/summarize")

        assert response.status_code == 200
        assert response.json() == {"summary": "A short summary."}
        body = fake_gateway.summarize.call_args.args[0]
        assert body.startswith("આ ગુજરાતીમાં")

    def test_summarize_missing_note(self, api_client):
        """Test summarizing an unknown note."""
        assert api_client.post("/notes/missing/summarize").status_code == 404


class TestHealth:
    """Test root and health endpoints."""

    def test_root(self, api_client):
        """Test the welcome message."""
        assert api_client.get("/").json() == {"message": "Welcome to SmartNote API"}

    def test_health(self, api_client):
        """Test a healthy store."""
        data = api_client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["notes"] == 3
        assert data["persistenceError"] is None

    def test_health_degraded_after_failed_save(self, api_client, note_store):
        """Test that an unsaved change is reported as degraded."""
        note_store.persist_errors[NOTES_KEY] = "Could not write blob 'notes'"

        data = api_client.get("/health").json()

        assert data["status"] == "degraded"
        assert data["persistenceError"] == "Could not write blob 'notes'"
        assert data["unsavedBlobs"] == ["notes"]

    def test_health_stays_degraded_until_preferences_saved(
        self, api_client, note_store, sample_note_data
    ):
        """Test that a successful notes write does not hide unsaved preferences."""
        note_store.persist_errors[PREFERENCES_KEY] = "Could not write blob 'preferences'"

        api_client.post("/notes", json=sample_note_data)
        data = api_client.get("/health").json()

        assert data["status"] == "degraded"
        assert data["unsavedBlobs"] == ["preferences"]

        api_client.put("/preferences", json={"viewMode": "list"})

        assert api_client.get("/health").json()["status"] == "healthy"
