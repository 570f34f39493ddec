"""Git hook scripts bundled with the package."""

from pathlib import Path

HOOKS_DIR = Path(__file__).parent

PREPARE_COMMIT_MSG = "prepare-commit-msg"


def hook_source(name: str) -> Path:
    """Get the path of a bundled hook script.

    Raises:
        FileNotFoundError: If no hook with that name is bundled.
    """
    path = HOOKS_DIR / name
    if not path.is_file():
        raise FileNotFoundError(f"No bundled hook named {name}")
    return path
