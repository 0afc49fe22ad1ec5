"""Load and validate environment variables. Uses python-dotenv.

This module is intentionally thin and side-effect free except for loading `.env`.
Callers should use the accessor functions below rather than reading `os.environ`
directly, to keep environment handling consistent.
"""

from pathlib import Path

from dotenv import load_dotenv
import os


def _project_root() -> Path:
    """Resolve project root (the directory holding app.py)."""
    return Path(__file__).resolve().parent.parent.parent


def load_config() -> None:
    """
    Load .env from project root. Idempotent; safe to call multiple times.
    Uses override=True to ensure .env values take precedence over existing env vars.
    """
    root = _project_root()
    env_path = root / ".env"
    load_dotenv(env_path, override=True)


def get_optional(key: str, default: str = "") -> str:
    """Get optional env var; return default if missing or empty."""
    load_config()
    val = os.getenv(key, "").strip()
    return val if val else default


def get_optional_float(key: str, default: float) -> float:
    """Get optional env var as float; return default if missing or invalid."""
    load_config()
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# --- Public config accessors ---

def backend_base_url() -> str:
    """Optional: blood-donation backend root. Default http://localhost:8080/api."""
    return get_optional("BACKEND_BASE_URL", "http://localhost:8080/api").rstrip("/")


def backend_timeout() -> float:
    """Optional: per-request timeout for backend calls, in seconds. Default 10."""
    return get_optional_float("BACKEND_TIMEOUT_SECONDS", 10.0)


def gemini_api_key() -> str:
    """Optional: Gemini API key. An empty key makes generation fall back to the error text."""
    return get_optional("GEMINI_API_KEY", "")


def gemini_model() -> str:
    """Optional: Gemini model name."""
    return get_optional("GEMINI_MODEL", "gemini-2.5-flash-preview-05-20")


def gemini_base_url() -> str:
    """Optional: Gemini API root."""
    return get_optional(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    ).rstrip("/")


def gemini_generate_url() -> str:
    """generateContent URL for the configured model (without the key parameter)."""
    return f"{gemini_base_url()}/models/{gemini_model()}:generateContent"


def gemini_timeout() -> float:
    """Optional: Gemini request timeout in seconds. Default 60."""
    return get_optional_float("GEMINI_TIMEOUT_SECONDS", 60.0)


def notification_seconds() -> float:
    """Optional: how long a toast notification stays visible. Default 3."""
    return get_optional_float("NOTIFICATION_SECONDS", 3.0)


def log_level() -> str:
    """Optional: LOG_LEVEL name (debug, info, warning...). Default info."""
    return get_optional("LOG_LEVEL", "info")


def log_file() -> Path | None:
    """Optional: LOG_FILE path, relative paths resolve against the project root."""
    val = get_optional("LOG_FILE", "")
    if not val:
        return None
    path = Path(val)
    return path if path.is_absolute() else _project_root() / path
