from __future__ import annotations

from pathlib import Path
import os

from dotenv import load_dotenv


API_KEY_VARS = ("OPENROUTER_API_KEY", "LLM_API_KEY")

# Values shipped in sample .env files that must never be sent upstream.
PLACEHOLDER_KEYS = frozenset(
    {
        "your_openrouter_api_key_here",
        "your_api_key_here",
        "changeme",
        "sk-...",
    }
)


class ConfigurationError(ValueError):
    """Raised when the completion service is not configured (missing or placeholder API key)."""


def find_dotenv(start_dir: Path | None = None, *, max_parents: int = 8) -> Path | None:
    """Find a .env file by walking upwards from start_dir (or cwd)."""
    current = (start_dir or Path.cwd()).resolve()
    for _ in range(max_parents + 1):
        candidate = current / ".env"
        if candidate.exists():
            return candidate
        if current.parent == current:
            break
        current = current.parent
    return None


def resolve_env_path(
    dotenv_path: Path | None = None,
    *,
    env_var: str = "JURIS_ENV_PATH",
) -> Path | None:
    """
    Resolve .env path with priority:
      1) explicit dotenv_path
      2) environment variable (JURIS_ENV_PATH)
      3) auto-discovery upwards from cwd
    """
    if dotenv_path:
        return Path(dotenv_path)

    env_path = os.getenv(env_var)
    if env_path:
        return Path(env_path).expanduser()

    return find_dotenv()


def load_env(dotenv_path: Path | None = None, *, override: bool = False) -> bool:
    """Load environment variables from a .env file. Returns False if none was found."""
    path = resolve_env_path(dotenv_path)
    if not path or not path.exists():
        return False
    return bool(load_dotenv(path, override=override))


def is_placeholder(value: str | None) -> bool:
    if value is None:
        return True
    value = value.strip()
    return not value or value.lower() in PLACEHOLDER_KEYS


def read_api_key(names: tuple[str, ...] = API_KEY_VARS) -> str:
    """
    Return the first configured API key among `names`.

    Raises ConfigurationError when every candidate is unset or still holds a
    placeholder, so callers can detect "not configured" before any request.
    """
    for name in names:
        value = os.getenv(name)
        if not is_placeholder(value):
            return value.strip()  # type: ignore[union-attr]
    raise ConfigurationError(f"Missing API key. Set {' or '.join(names)}.")
