"""Tests for preference endpoints."""

import json


class TestPreferencesEndpoints:
    """Test reading and changing preferences."""

    def test_defaults(self, api_client):
        """Test the default view mode and language."""
        response = api_client.get("/preferences")

        assert response.status_code == 200
        assert response.json() == {"viewMode": "grid", "activeLanguage": "gu"}

    def test_switch_language_changes_listing(self, api_client):
        """Test that the active language drives the note list."""
        response = api_client.put("/preferences", json={"activeLanguage": "en"})

        assert response.json()["activeLanguage"] == "en"
        listing = api_client.get("/notes").json()
        assert listing["language"] == "en"
        assert listing["notes"] == []

    def test_new_note_uses_active_language(self, api_client, sample_note_data):
        """Test that notes are created in the active language."""
        api_client.put("/preferences", json={"activeLanguage": "hi"})

        created = api_client.post("/notes", json=sample_note_data).json()

        assert set(created["content"]) == {"hi"}

    def test_partial_update(self, api_client):
        """Test that omitted fields are left unchanged."""
        api_client.put("/preferences", json={"activeLanguage": "hi"})

        response = api_client.put("/preferences", json={"viewMode": "list"})

        assert response.json() == {"viewMode": "list", "activeLanguage": "hi"}

    def test_preferences_persisted(self, api_client, tmp_path):
        """Test that preferences are written to their own blob."""
        api_client.put("/preferences", json={"viewMode": "list"})

        stored = json.loads((tmp_path / "preferences.json").read_text(encoding="utf-8"))
        assert stored["viewMode"] == "list"

    def test_invalid_view_mode(self, api_client):
        """Test that unknown view modes are rejected."""
        response = api_client.put("/preferences", json={"viewMode": "cards"})

        assert response.status_code == 422
