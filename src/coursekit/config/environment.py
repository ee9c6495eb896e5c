"""
.env support.

COURSEKIT_* variables may be kept in a .env file in the working directory.
The file is read at most once per process, and variables that are already
set in the environment take precedence over it.
"""

from pathlib import Path

from dotenv import load_dotenv

_dotenv_loaded: bool = False


def ensure_dotenv_loaded(env_file: str = ".env") -> bool:
    """Read env_file into os.environ unless an earlier call already did.

    Returns:
        True if the file was read by this or an earlier call
    """
    global _dotenv_loaded

    if _dotenv_loaded:
        return True
    _dotenv_loaded = True

    path = Path(env_file)
    if not path.is_file():
        return False
    load_dotenv(path, override=False)
    return True


def reset_environment() -> None:
    """Let the next ensure_dotenv_loaded() call read the file again."""
    global _dotenv_loaded
    _dotenv_loaded = False
