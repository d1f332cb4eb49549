"""Preference command handlers."""

import httpx

from api.models import Language

from ..config import API_URL, REQUEST_TIMEOUT, report_http_error

VIEW_MODES = ("grid", "list")


def _update_preferences(payload: dict) -> dict | None:
    try:
        response = httpx.put(f"{API_URL}/preferences", json=payload, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPError as e:
        report_http_error(e, "update preferences")
        return None


def show_preferences():
    """Print the active language and view mode."""
    try:
        response = httpx.get(f"{API_URL}/preferences", timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        prefs = response.json()
    except httpx.HTTPError as e:
        report_http_error(e, "load preferences")
        return

    language = Language(prefs["activeLanguage"])
    print(f"\nLanguage: {language.display_name} ({language.value})")
    print(f"View: {prefs['viewMode']}\n")


def set_language(code: str):
    """Switch the active language: /lang gu|hi|en."""
    codes = [language.value for language in Language]
    if code not in codes:
        print(f"Usage: /lang <{'|'.join(codes)}>\n")
        return

    prefs = _update_preferences({"activeLanguage": code})
    if prefs:
        print(f"✓ Active language is now {Language(code).display_name}.\n")


def set_view_mode(mode: str):
    """Switch between grid and list display."""
    if mode not in VIEW_MODES:
        print(f"Usage: /view <{'|'.join(VIEW_MODES)}>\n")
        return

    prefs = _update_preferences({"viewMode": mode})
    if prefs:
        print(f"✓ View mode is now {mode}.\n")
