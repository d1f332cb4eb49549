"""System prompts for the AI assistant flows."""

from pathlib import Path


def load_prompt(filename: str) -> str:
    """Load a prompt template from the prompts directory.

    Args:
        filename: Name of the prompt file (e.g., 'summarize_prompt.txt')

    Returns:
        Prompt template as string
    """
    prompt_path = Path(__file__).parent / filename
    return prompt_path.read_text(encoding="utf-8").strip()


def get_summarize_prompt() -> str:
    """Get the system prompt for note summaries."""
    return load_prompt("summarize_prompt.txt")


def get_translate_prompt(target_language_name: str) -> str:
    """Get the translation system prompt for a target language.

    Args:
        target_language_name: Human-readable language name (e.g., 'Gujarati')

    Returns:
        Complete system prompt
    """
    template = load_prompt("translate_prompt.txt")
    return template.format(target_language_name=target_language_name)


def get_chat_system_prompt() -> str:
    """Get the SmartBot persona prompt."""
    return load_prompt("chat_system_prompt.txt")
