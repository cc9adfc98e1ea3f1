"""Chat relay configuration — endpoint default, deadlines, storage and logging.

Single source of truth for runtime settings. The TUI, the HTTP API and the
CLI entry point all import from here.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from shared.constants import DEFAULT_CHAT_TIMEOUT, DEFAULT_PROBE_TIMEOUT

load_dotenv()

# Used until the user saves an endpoint of their own
WEBHOOK_URL = os.getenv("WEBHOOK_URL", "http://localhost:5678/webhook/chat")

CHAT_TIMEOUT_SECONDS = float(os.getenv("CHAT_TIMEOUT_SECONDS", str(DEFAULT_CHAT_TIMEOUT)))
PROBE_TIMEOUT_SECONDS = float(os.getenv("PROBE_TIMEOUT_SECONDS", str(DEFAULT_PROBE_TIMEOUT)))

CHAT_DB_PATH = Path(os.getenv("CHAT_DB_PATH", str(Path(__file__).parent / "chat.db")))
CHAT_API_PORT = int(os.getenv("CHAT_API_PORT", "3001"))

LOG_DIR = Path(os.getenv("LOG_DIR", str(Path(__file__).parent / "logs")))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
