"""Server entry point for running the SmartNote API."""

import asyncio
import os
import signal

import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

APP_PATH = "api.app:app"


class Server:
    """Custom server wrapper with proper signal handling."""

    def __init__(self, config: uvicorn.Config):
        self.server = uvicorn.Server(config)

    def handle_exit(self, _sig, _frame):
        """Handle exit signals; uvicorn's shutdown runs the lifespan and saves notes."""
        print("\n[INFO] Received shutdown signal, stopping server...")
        self.server.should_exit = True

    async def serve(self):
        """Run the server with proper signal handling."""
        signal.signal(signal.SIGINT, self.handle_exit)
        signal.signal(signal.SIGTERM, self.handle_exit)

        await self.server.serve()


def run_server(host: str | None = None, port: int | None = None, reload: bool = False):
    """Run the FastAPI server.

    The note store is single-user, so the server binds to localhost unless
    SMARTNOTE_HOST says otherwise.
    """
    host = host or os.getenv("SMARTNOTE_HOST", "127.0.0.1")
    port = port or int(os.getenv("SMARTNOTE_PORT", "8000"))

    if reload:
        # Ctrl-C handling may be degraded in reload mode due to the subprocess
        uvicorn.run(APP_PATH, host=host, port=port, reload=True, log_level="info", access_log=False)
        return

    config = uvicorn.Config(APP_PATH, host=host, port=port, log_level="info", access_log=False)
    asyncio.run(Server(config).serve())


def main():
    """Console entry point."""
    run_server(reload=os.getenv("SMARTNOTE_RELOAD", "false").lower() == "true")


if __name__ == "__main__":
    run_server(reload=True)
