"""Tests for the AI assistant endpoints."""

from api.exceptions import ServiceError, ValidationError
from api.models import NoteContent


class TestSummarizeEndpoint:
    """Test /ai/summarize."""

    def test_summarize(self, api_client, fake_gateway, long_body):
        """Test summarizing raw note text."""
        response = api_client.post("/ai/summarize", json={"note": long_body})

        assert response.status_code == 200
        assert response.json() == {"summary": "A short summary."}
        fake_gateway.summarize.assert_awaited_once_with(long_body)

    def test_summarize_too_short(self, api_client, fake_gateway):
        """Test that the gateway's length check maps to 400."""
        fake_gateway.summarize.side_effect = ValidationError("Note is too short to summarize")

        response = api_client.post("/ai/summarize", json={"note": "short"})

        assert response.status_code == 400
        assert response.json()["code"] == "VAL_VALIDATION_ERROR"

    def test_summarize_empty_note(self, api_client):
        """Test request validation."""
        assert api_client.post("/ai/summarize", json={"note": ""}).status_code == 422


class TestTranslateEndpoint:
    """Test /ai/translate."""

    def test_translate(self, api_client, fake_gateway):
        """Test translating a title and body."""
        fake_gateway.translate.return_value = NoteContent(title="ખરીદી", body="દૂધ")

        response = api_client.post(
            "/ai/translate",
            json={"title": "Shopping", "body": "Milk", "targetLanguage": "gu"},
        )

        assert response.status_code == 200
        assert response.json() == {"translatedTitle": "ખરીદી", "translatedBody": "દૂધ"}

    def test_translate_unknown_language(self, api_client):
        """Test that only supported languages are accepted."""
        response = api_client.post(
            "/ai/translate", json={"title": "a", "body": "b", "targetLanguage": "de"}
        )

        assert response.status_code == 422


class TestChatEndpoint:
    """Test /ai/chat."""

    def test_chat(self, api_client, fake_gateway):
        """Test a chat turn."""
        history = [
            {"role": "model", "text": "Hello! I am SmartBot. How can I help you today?"},
            {"role": "user", "text": "How do I pin a note?"},
        ]

        response = api_client.post("/ai/chat", json={"history": history})

        assert response.status_code == 200
        assert response.json() == {"response": "Hello from SmartBot!"}
        sent = fake_gateway.chat.call_args.args[0]
        assert [message.role for message in sent] == ["model", "user"]

    def test_chat_last_turn_must_be_user(self, api_client, fake_gateway):
        """Test that a history ending with a model turn is rejected."""
        response = api_client.post(
            "/ai/chat", json={"history": [{"role": "model", "text": "Hi"}]}
        )

        assert response.status_code == 400
        fake_gateway.chat.assert_not_called()

    def test_chat_empty_history(self, api_client):
        """Test that an empty history is rejected."""
        assert api_client.post("/ai/chat", json={"history": []}).status_code == 422

    def test_chat_unknown_role(self, api_client):
        """Test that only user and model roles are accepted."""
        response = api_client.post(
            "/ai/chat", json={"history": [{"role": "system", "text": "x"}]}
        )

        assert response.status_code == 422

    def test_chat_service_error(self, api_client, fake_gateway):
        """Test that model failures map to 502."""
        fake_gateway.chat.side_effect = ServiceError("The assistant could not chat right now")

        response = api_client.post("/ai/chat", json={"history": [{"role": "user", "text": "Hi"}]})

        assert response.status_code == 502
        assert response.json()["code"] == "EXT_SERVICE_ERROR"
