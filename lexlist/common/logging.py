"""Console logging utilities for the crawl and index steps."""

import sys
from typing import Optional, TextIO


class LogContext:
    """Holds the label prefixed to every console line (the character being processed)."""

    def __init__(self) -> None:
        self.label: str = ""

    def set(self, label: str) -> None:
        self.label = label or ""

    def clear(self) -> None:
        self.label = ""


LOG_CONTEXT = LogContext()


def set_log_context(label: str) -> None:
    """Set the logging context (usually a character id) for subsequent lines."""
    LOG_CONTEXT.set(label)


def clear_log_context() -> None:
    """Reset the logging context to the run-level default."""
    LOG_CONTEXT.clear()


def log_debug(enabled: bool, message: str) -> None:
    """Print a debug message if debugging is enabled."""
    if enabled:
        print(f"[debug] {message}")


def log_error(message: str) -> None:
    """Print an error line to stderr."""
    print(f"[error] {message}", file=sys.stderr)


_EMOJI_FOR_TAG = {
    "fetch": "🌐",
    "retry": "🔁",
    "file": "💾",
    "skip": "⏭️",
    "error": "💥",
    "ok": "✅",
}


def _emoji_for(line: str) -> str:
    """Map the first status tag found in a line to an emoji."""
    pos = 0
    while line.startswith("[", pos):
        end = line.find("]", pos)
        if end == -1:
            return ""
        emoji = _EMOJI_FOR_TAG.get(line[pos + 1:end], "")
        if emoji:
            return emoji
        pos = end + 1
        while pos < len(line) and line[pos] == " ":
            pos += 1
    return ""


class _ContextPrefixedWriter:
    """Wrapper for stdout that prefixes each line with the log context."""

    def __init__(self, wrapped: TextIO, context: Optional[LogContext] = None):
        self._wrapped = wrapped
        self._context = context or LOG_CONTEXT
        self._at_line_start = True

    def _prefix(self) -> str:
        label = self._context.label
        return f"[{label}] " if label else "[main] "

    def write(self, s: str) -> int:
        if not isinstance(s, str):
            return 0
        parts = s.split("\n")
        for i, part in enumerate(parts):
            if part:
                if self._at_line_start:
                    emoji = _emoji_for(part)
                    self._wrapped.write(self._prefix() + (emoji + " " if emoji else "") + part)
                else:
                    self._wrapped.write(part)
                self._at_line_start = False
            if i < len(parts) - 1:
                self._wrapped.write("\n")
                self._at_line_start = True
        self.flush()
        return len(s)

    def flush(self) -> None:
        try:
            self._wrapped.flush()
        except (OSError, ValueError):
            pass

    def isatty(self) -> bool:
        try:
            return bool(self._wrapped.isatty())
        except (OSError, ValueError):
            return False


def setup_prefixed_stdout() -> None:
    """Set up context-prefixed stdout writer."""
    if isinstance(sys.stdout, _ContextPrefixedWriter):
        return
    try:
        sys.stdout.reconfigure(line_buffering=True)  # type: ignore
    except AttributeError:
        pass
    sys.stdout = _ContextPrefixedWriter(sys.stdout)  # type: ignore
