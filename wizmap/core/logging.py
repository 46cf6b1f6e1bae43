"""
Wizmap Logging - Trace of editing decisions

Rejected edits never raise; they leave one line in this trace instead.
Every line goes to the console and, once init_logging() has opened it,
to wizmap_debug.log. Each component writes under its own prefix:

    [Placement]          tile/path clicks that were refused and why
    [PathGraph]          path cells added and removed
    [Arrows]             arrow points accepted or refused, finished arrows
    [EditorSession]      edits applied to the open map
    [MapStore]           saves, loads, imports and skipped files
    [ToolManager]        tool and mode switches, failing callbacks
    [MouseEventHandler]  wheel selection changes
"""
from datetime import datetime
from pathlib import Path

LOG_FILE_NAME = "wizmap_debug.log"

# Open trace file, or None while only the console is used
_log_file = None
_log_enabled = True


def init_logging(log_dir: str = None):
    """
    Start a fresh trace file.

    Args:
        log_dir: Directory for wizmap_debug.log, defaults to the directory
            holding the wizmap package
    """
    global _log_file

    close_logging()
    if log_dir is None:
        log_dir = Path(__file__).parent.parent.parent
    log_path = Path(log_dir) / LOG_FILE_NAME

    try:
        _log_file = open(log_path, 'w', encoding='utf-8')
        _log_file.write(f"=== Wizmap Debug Log - {datetime.now().isoformat()} ===\n\n")
        _log_file.flush()
        print(f"[Wizmap] Logging to: {log_path}")
    except OSError as e:
        print(f"[Wizmap] Warning: Could not create log file: {e}")
        _log_file = None


def log(message: str, prefix: str = "[Wizmap]"):
    """Write one trace line to the console and the trace file"""
    line = f"{prefix} {message}"
    print(line)

    if _log_file and _log_enabled:
        try:
            _log_file.write(line + "\n")
            _log_file.flush()
        except (OSError, ValueError):
            # Trace output must never break an edit
            pass


def log_placement(message: str):
    log(message, "[Placement]")


def log_paths(message: str):
    log(message, "[PathGraph]")


def log_arrows(message: str):
    log(message, "[Arrows]")


def log_session(message: str):
    log(message, "[EditorSession]")


def log_store(message: str):
    log(message, "[MapStore]")


def log_tools(message: str):
    log(message, "[ToolManager]")


def log_handler(message: str):
    log(message, "[MouseEventHandler]")


def close_logging():
    """Close the trace file; later lines only reach the console"""
    global _log_file
    if _log_file:
        try:
            _log_file.close()
        except OSError:
            pass
        _log_file = None


def set_logging_enabled(enabled: bool):
    """Pause or resume writing to the trace file (console output continues)"""
    global _log_enabled
    _log_enabled = enabled


def is_file_logging_active() -> bool:
    return _log_file is not None and _log_enabled
