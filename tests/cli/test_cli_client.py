"""Tests for the terminal client."""

from unittest.mock import MagicMock, patch

import httpx

from cli.client import handle_command
from cli.commands.chat import FAILURE_REPLY, GREETING, ChatSession


def ok_response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


class TestChatSession:
    """Test the SmartBot conversation kept by the client."""

    def test_starts_with_greeting(self):
        """Test that the history opens with the SmartBot greeting."""
        assert ChatSession().history == [{"role": "model", "text": GREETING}]

    def test_send_appends_both_turns(self):
        """Test that a successful turn records the question and the reply."""
        chat = ChatSession()

        with patch("cli.commands.chat.httpx.post", return_value=ok_response({"response": "Hi!"})) as post:
            reply = chat.send("Hello")

        assert reply == "Hi!"
        sent = post.call_args.kwargs["json"]["history"]
        assert sent[-1] == {"role": "user", "text": "Hello"}
        assert chat.history[-1] == {"role": "model", "text": "Hi!"}

    def test_send_failure_records_apology(self, capsys):
        """Test that a failed request still yields a model turn."""
        chat = ChatSession()

        with patch("cli.commands.chat.httpx.post", side_effect=httpx.ConnectError("refused")):
            reply = chat.send("Hello")

        assert reply == FAILURE_REPLY
        assert chat.history[-1] == {"role": "model", "text": FAILURE_REPLY}
        assert "Could not connect" in capsys.readouterr().out

    def test_reset(self):
        """Test that reset starts a new conversation."""
        chat = ChatSession()
        chat.history.append({"role": "user", "text": "x"})

        chat.reset()

        assert chat.history == [{"role": "model", "text": GREETING}]


class TestHandleCommand:
    """Test dispatching REPL input."""

    def test_command_with_argument(self):
        """Test that arguments are passed through to the command."""
        handler = MagicMock()

        with patch.dict("cli.client.ARG_COMMANDS", {"/pin": handler}):
            handle_command("/pin  abc ", ChatSession())

        handler.assert_called_once_with("abc")

    def test_search_passes_query(self):
        """Test that /search forwards the whole query."""
        handler = MagicMock()

        with patch.dict("cli.client.ARG_COMMANDS", {"/search": handler}):
            handle_command("/search milk and bread", ChatSession())

        handler.assert_called_once_with("milk and bread")

    def test_unknown_command(self, capsys):
        """Test that unknown slash commands are not sent to the chat."""
        chat = MagicMock()

        handle_command("/bogus", chat)

        chat.send.assert_not_called()
        assert "Unknown command" in capsys.readouterr().out

    def test_plain_text_goes_to_chat(self, capsys):
        """Test that other input is a chat turn."""
        chat = MagicMock()
        chat.send.return_value = "Sure."

        handle_command("What can you do?", chat)

        chat.send.assert_called_once_with("What can you do?")
        assert "SmartBot: Sure." in capsys.readouterr().out

    def test_translate_usage(self, capsys):
        """Test that /translate validates its arguments before calling the API."""
        with patch("cli.commands.notes.httpx.post") as post:
            handle_command("/translate 1 fr", ChatSession())

        post.assert_not_called()
        assert "Usage: /translate" in capsys.readouterr().out
