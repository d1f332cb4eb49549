"""Configuration and shared request helpers for the CLI client."""

import os

import httpx

# Configuration
API_URL = os.getenv("SMARTNOTE_API_URL", "http://localhost:8000")
REQUEST_TIMEOUT = 10.0
# AI calls wait on the model, so they get a longer timeout
AI_TIMEOUT = float(os.getenv("SMARTNOTE_AI_TIMEOUT", "90"))


def report_http_error(error: httpx.HTTPError, action: str) -> None:
    """Print a readable message for a failed API request."""
    if isinstance(error, httpx.ConnectError):
        print("Error: Could not connect to API server.")
        print("Please start the server with: python -m api.server\n")
        return

    if isinstance(error, httpx.HTTPStatusError):
        try:
            detail = error.response.json().get("detail", "Unknown error")
        except ValueError:
            detail = error.response.text or "Unknown error"
        if error.response.status_code == 404:
            print(f"Error: Failed to {action}: note not found.\n")
        else:
            print(f"Error: Failed to {action}: {detail}\n")
        return

    print(f"Error: API request failed: {error}\n")
