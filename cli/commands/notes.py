"""Notes command handlers."""

import asyncio
import os
import subprocess
import sys
import tempfile
from datetime import datetime
from pathlib import Path

import httpx

from api.exceptions import ServiceError, UnsupportedCapabilityError
from api.models import COLOR_PALETTE, DEFAULT_COLOR, Language
from api.services.transcript import DraftBody, dictate
from connectors.speech import SpeechRecognitionSource

from ..config import AI_TIMEOUT, API_URL, REQUEST_TIMEOUT, report_http_error

# Body lines shown per note, like the card clamp in each view mode
PREVIEW_LINES = {"grid": 6, "list": 2}


def _get_editor():
    """Get the user's preferred text editor."""
    editor = os.environ.get("EDITOR") or os.environ.get("VISUAL")
    if editor:
        return editor

    if sys.platform == "win32":
        return "notepad"
    for editor_cmd in ["nano", "vim", "vi"]:
        try:
            subprocess.run(
                ["which", editor_cmd],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=True,
            )
            return editor_cmd
        except (subprocess.CalledProcessError, FileNotFoundError):
            continue

    return "vi"


def _edit_text(initial: str = "") -> str | None:
    """Open the user's editor on ``initial`` and return the saved text, or None on failure."""
    with tempfile.NamedTemporaryFile(
        mode="w", suffix=".txt", delete=False, encoding="utf-8"
    ) as tmp_file:
        tmp_file.write(initial)
        tmp_path = Path(tmp_file.name)

    try:
        editor = _get_editor()
        print(f"\nOpening editor ({editor}); save and close it when you are done.\n")
        try:
            subprocess.run([editor, str(tmp_path)], check=True)
        except subprocess.CalledProcessError:
            print(f"\nError: Editor '{editor}' exited with an error.\n")
            return None
        except FileNotFoundError:
            print(f"\nError: Editor '{editor}' not found.\n")
            print("You can set your preferred editor with: export EDITOR=nano\n")
            return None
        return tmp_path.read_text(encoding="utf-8")
    finally:
        tmp_path.unlink(missing_ok=True)


def _format_updated(value: str) -> str:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%Y-%m-%d %H:%M")
    except ValueError:
        return value


def _ask_title(current: str = "") -> str | None:
    prompt = f"Title [{current}]: " if current else "Title: "
    title = input(prompt).strip() or current
    if not title:
        print("Error: Title is required.\n")
        return None
    if len(title) > 100:
        print("Error: Title must be at most 100 characters.\n")
        return None
    return title


def _choose_color(current: str = DEFAULT_COLOR) -> str:
    print("Colors: " + "  ".join(f"{i}) {color}" for i, color in enumerate(COLOR_PALETTE, 1)))
    choice = input(f"Color number (Enter keeps {current}): ").strip()
    if choice.isdigit() and 1 <= int(choice) <= len(COLOR_PALETTE):
        return COLOR_PALETTE[int(choice) - 1]
    return current


def _view_mode() -> str:
    try:
        response = httpx.get(f"{API_URL}/preferences", timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json().get("viewMode", "grid")
    except httpx.HTTPError:
        return "grid"


def _print_note(note: dict, view_mode: str) -> None:
    pinned = "📌 " if note.get("isPinned") else ""
    print(f"{pinned}{note['title']}")

    body_lines = note.get("body", "").splitlines()
    limit = PREVIEW_LINES.get(view_mode, 2)
    for line in body_lines[:limit]:
        print(f"  {line}")
    if len(body_lines) > limit:
        print("  …")

    languages = ", ".join(note.get("availableLanguages", []))
    print(f"  ID: {note['id']} | Languages: {languages} | Color: {note.get('color')}")
    print(f"  Updated: {_format_updated(note.get('updatedAt', ''))}\n")


def list_notes(query: str = ""):
    """List notes in the active language, optionally filtered by a search query."""
    try:
        params = {"q": query} if query else {}
        response = httpx.get(f"{API_URL}/notes", params=params, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPError as e:
        report_http_error(e, "list notes")
        return

    notes = data.get("notes", [])
    language = data.get("language")

    if not notes:
        if query:
            print(f"\nNo notes matching '{query}' in language '{language}'.\n")
        else:
            print(f"\nNo notes in language '{language}' yet. Use /new to create one.\n")
        return

    header = f"Notes matching '{query}'" if query else "Your Notes"
    print(f"\n=== {header} ({data.get('total', len(notes))}, language: {language}) ===\n")

    view_mode = _view_mode()
    for note in notes:
        _print_note(note, view_mode)


def _post_note(title: str, body: str) -> None:
    color = _choose_color()
    is_pinned = input("Pin this note? (y/N): ").strip().lower() == "y"

    try:
        response = httpx.post(
            f"{API_URL}/notes",
            json={"title": title, "body": body, "color": color, "isPinned": is_pinned},
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPError as e:
        report_http_error(e, "create note")
        return

    print("\n✓ Note created successfully!")
    print(f"  Note ID: {data['id']}")
    print(f"  Created: {_format_updated(data['createdAt'])}\n")


def create_note():
    """Create a note, writing the body in an external editor."""
    print("\n=== Create New Note ===")

    title = _ask_title()
    if title is None:
        return

    body = _edit_text()
    if body is None:
        return
    if not body.strip():
        print("\nError: Note body cannot be empty.\n")
        return

    _post_note(title, body)


def _active_language() -> str:
    try:
        response = httpx.get(f"{API_URL}/preferences", timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json().get("activeLanguage", Language.GU.value)
    except httpx.HTTPError:
        return Language.GU.value


def dictate_body(language: Language, source: SpeechRecognitionSource | None = None) -> str | None:
    """Record a note body from the microphone. Returns None if nothing could be captured."""
    source = source or SpeechRecognitionSource()
    draft = DraftBody()

    print(f"Listening in {language.display_name}... pause for a few seconds to finish.")
    try:
        asyncio.run(dictate(source, draft, language))
    except UnsupportedCapabilityError as e:
        print(f"Error: {e.message}\n")
        return None
    except ServiceError as e:
        print(f"Error: {e.message}")
    except KeyboardInterrupt:
        source.stop()
        print("\nDictation stopped.")

    body = draft.commit()
    return body or None


def dictate_note():
    """Create a note whose body is dictated through the microphone."""
    print("\n=== Dictate New Note ===")

    title = _ask_title()
    if title is None:
        return

    body = dictate_body(Language(_active_language()))
    if body is None:
        print("Error: No speech was captured.\n")
        return

    print(f"\nTranscript:\n{body}\n")
    if input("Save this note? (Y/n): ").strip().lower() == "n":
        print("Discarded.\n")
        return

    _post_note(title, body)


def edit_note(note_id: str):
    """Edit the active-language title, body and color of a note."""
    if not note_id:
        print("Usage: /edit <note_id>\n")
        return

    try:
        response = httpx.get(f"{API_URL}/notes/{note_id}", timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        note = response.json()
    except httpx.HTTPError as e:
        report_http_error(e, "load note")
        return

    language = _active_language()
    current = note["content"].get(language) or {"title": "", "body": ""}
    if not note["content"].get(language):
        print(f"\nThis note has no '{language}' version yet; saving will add one.")

    print(f"\n=== Edit Note ({language}) ===")
    title = _ask_title(current["title"])
    if title is None:
        return

    body = _edit_text(current["body"])
    if body is None:
        return
    if not body.strip():
        print("\nError: Note body cannot be empty.\n")
        return

    color = _choose_color(note.get("color", DEFAULT_COLOR))

    try:
        response = httpx.put(
            f"{API_URL}/notes/{note_id}",
            json={"title": title, "body": body, "color": color},
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
    except httpx.HTTPError as e:
        report_http_error(e, "update note")
        return

    print("\n✓ Note updated successfully!\n")


def delete_note(note_id: str):
    """Delete a note after confirmation."""
    if not note_id:
        print("Usage: /delete <note_id>\n")
        return

    confirm = input("This cannot be undone. Delete this note? (y/N): ").strip().lower()
    if confirm != "y":
        print("Cancelled.\n")
        return

    try:
        response = httpx.delete(f"{API_URL}/notes/{note_id}", timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
    except httpx.HTTPError as e:
        report_http_error(e, "delete note")
        return

    print("✓ Note deleted.\n")


def toggle_pin(note_id: str):
    """Pin or unpin a note."""
    if not note_id:
        print("Usage: /pin <note_id>\n")
        return

    try:
        response = httpx.post(f"{API_URL}/notes/{note_id}/pin", timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        note = response.json()
    except httpx.HTTPError as e:
        report_http_error(e, "pin note")
        return

    print("✓ Note pinned.\n" if note["isPinned"] else "✓ Note unpinned.\n")


def translate_note(args: str):
    """Translate a note: /translate <note_id> <language>."""
    parts = args.split()
    if len(parts) != 2 or parts[1] not in {language.value for language in Language}:
        codes = ", ".join(language.value for language in Language)
        print(f"Usage: /translate <note_id> <language>  (languages: {codes})\n")
        return

    note_id, target = parts
    print(f"Translating into {Language(target).display_name}...")

    try:
        response = httpx.post(
            f"{API_URL}/notes/{note_id}/translate",
            json={"targetLanguage": target},
            timeout=AI_TIMEOUT,
        )
        response.raise_for_status()
        note = response.json()
    except httpx.HTTPError as e:
        report_http_error(e, "translate note")
        return

    translated = note["content"][target]
    print(f"\n✓ {translated['title']}")
    print(f"  Available in: {', '.join(note['content'])}\n")


def summarize_note(note_id: str):
    """Show an AI summary of a note."""
    if not note_id:
        print("Usage: /summarize <note_id>\n")
        return

    print("Summarizing...")
    try:
        response = httpx.post(f"{API_URL}/notes/{note_id}/summarize", timeout=AI_TIMEOUT)
        response.raise_for_status()
        summary = response.json()["summary"]
    except httpx.HTTPError as e:
        report_http_error(e, "summarize note")
        return

    print("\n=== AI Summary ===")
    print(f"{summary}\n")
