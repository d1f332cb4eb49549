"""SmartBot chat command handlers."""

import httpx

from ..config import AI_TIMEOUT, API_URL, report_http_error

GREETING = "Hello! I am SmartBot. How can I help you today?"
FAILURE_REPLY = "Sorry, I am having some trouble right now."


class ChatSession:
    """Conversation with SmartBot, kept in memory for the life of the CLI."""

    def __init__(self):
        self.history: list[dict] = []
        self.reset()

    def reset(self) -> None:
        self.history = [{"role": "model", "text": GREETING}]

    def send(self, text: str) -> str:
        """Send a user turn and return the assistant reply.

        A failed request still produces a reply so the transcript keeps
        alternating between user and model turns.
        """
        self.history.append({"role": "user", "text": text})

        try:
            response = httpx.post(
                f"{API_URL}/ai/chat",
                json={"history": self.history},
                timeout=AI_TIMEOUT,
            )
            response.raise_for_status()
            reply = response.json()["response"]
        except httpx.ConnectError as e:
            report_http_error(e, "chat")
            reply = FAILURE_REPLY
        except httpx.HTTPError:
            reply = FAILURE_REPLY

        self.history.append({"role": "model", "text": reply})
        return reply
