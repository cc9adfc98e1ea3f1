"""Shared constants for the chat relay core and its front ends."""

# Deadlines (seconds)
DEFAULT_CHAT_TIMEOUT = 60
DEFAULT_PROBE_TIMEOUT = 15

PROBE_MESSAGE = "Connection test"

# Order matters: first key with a non-null value wins
REPLY_KEYS = ("output", "response", "message", "text", "content", "answer")

# Literal placeholders some agents echo for a missing field
PLACEHOLDER_REPLIES = ("undefined", "null")

# Assistant-visible error messages
ERROR_TIMEOUT = (
    "Sorry, the agent did not respond within {seconds} seconds. "
    "Please try again later."
)
ERROR_NETWORK = (
    "Sorry, I could not reach the agent. "
    "Please check your webhook URL or your network connection."
)
ERROR_REMOTE = "Sorry, the agent returned an error (HTTP {status}). Please try again later."
ERROR_EMPTY_BODY = "Sorry, the agent sent back an empty response."
ERROR_MALFORMED = "Sorry, the agent's response could not be read."
ERROR_UNRECOGNIZED = "Sorry, I could not understand the agent's response."
ERROR_UNKNOWN = (
    "Sorry, I encountered an error processing your request. "
    "Please check your webhook URL or try again later."
)
