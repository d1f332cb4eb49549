"""Main CLI client with REPL loop."""

import os

from dotenv import load_dotenv

from .commands import (
    ChatSession,
    create_note,
    delete_note,
    dictate_note,
    edit_note,
    list_notes,
    set_language,
    set_view_mode,
    show_preferences,
    summarize_note,
    toggle_pin,
    translate_note,
)

# Commands that take the rest of the line as their argument
ARG_COMMANDS = {
    "/search": list_notes,
    "/edit": edit_note,
    "/delete": delete_note,
    "/pin": toggle_pin,
    "/translate": translate_note,
    "/summarize": summarize_note,
    "/lang": set_language,
    "/view": set_view_mode,
}

NO_ARG_COMMANDS = {
    "/notes": list_notes,
    "/new": create_note,
    "/dictate": dictate_note,
    "/prefs": show_preferences,
}


def print_help():
    print("\nNote Commands:")
    print("  /notes - List notes in the active language")
    print("  /search <text> - Search titles and bodies")
    print("  /new - Create a note in your editor")
    print("  /dictate - Create a note by speaking")
    print("  /edit <id> - Edit a note")
    print("  /delete <id> - Delete a note")
    print("  /pin <id> - Pin or unpin a note")
    print("\nAI Commands:")
    print("  /translate <id> <gu|hi|en> - Add a translated version of a note")
    print("  /summarize <id> - Summarize a note")
    print("  /reset - Start a new SmartBot conversation")
    print("  Anything else is sent to SmartBot")
    print("\nPreferences:")
    print("  /lang <gu|hi|en> - Switch the active language")
    print("  /view <grid|list> - Switch the display mode")
    print("  /prefs - Show current preferences")
    print("\nUtility Commands:")
    print("  /help - Show this help")
    print("  /clear - Clear the terminal screen")
    print("\nType 'exit' or 'quit' to leave.")


def handle_command(user_input: str, chat: ChatSession) -> None:
    """Dispatch one line of input to a command or to SmartBot."""
    command, _, argument = user_input.partition(" ")
    command = command.lower()
    argument = argument.strip()

    if command in NO_ARG_COMMANDS:
        NO_ARG_COMMANDS[command]()
        return

    if command in ARG_COMMANDS:
        ARG_COMMANDS[command](argument)
        return

    if command == "/help":
        print_help()
        return

    if command == "/reset":
        chat.reset()
        print(f"SmartBot: {chat.history[0]['text']}\n")
        return

    if command == "/clear":
        # Clear terminal screen (cross-platform)
        os.system("cls" if os.name == "nt" else "clear")
        return

    if command.startswith("/"):
        print(f"Unknown command: {command}. Type /help for a list of commands.\n")
        return

    reply = chat.send(user_input)
    print(f"SmartBot: {reply}\n")


def main():
    """CLI client for the SmartNote API."""
    load_dotenv()

    print("Welcome to SmartNote!")
    print_help()
    print("Note: Make sure the API server is running (python -m api.server)\n")

    chat = ChatSession()
    print(f"SmartBot: {chat.history[0]['text']}\n")

    while True:
        try:
            user_input = input("You: ").strip()

            if user_input.lower() in ["exit", "quit"]:
                print("\nGoodbye!")
                break

            if not user_input:
                continue

            handle_command(user_input, chat)

        except KeyboardInterrupt:
            print("\n\nGoodbye!")
            break
        except EOFError:
            print("\n\nGoodbye!")
            break


if __name__ == "__main__":
    main()
