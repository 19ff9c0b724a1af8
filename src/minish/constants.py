"""Shared constants for minish."""

APP_NAME = "minish"

DEFAULT_PROMPT = "> "
DEFAULT_HISTORY_FILE = "~/.minish_history"

# Size of each stdin read; lines longer than this are accumulated across reads.
READ_CHUNK_SIZE = 4096

ENV_PROMPT = "MINISH_PROMPT"
ENV_LOG_FILE = "MINISH_LOG_FILE"
ENV_DEBUG = "MINISH_DEBUG"

ERROR_PREFIX = f"{APP_NAME}:"
