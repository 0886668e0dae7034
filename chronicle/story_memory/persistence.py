"""
JSON save/load for story memory snapshots.
"""

from pathlib import Path
from typing import Union
import json
import logging

from chronicle.story_memory.store import StoryMemory

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class StoryMemoryLoadError(Exception):
    """Raised when a story memory snapshot cannot be read."""


def save_story_memory(memory: StoryMemory, path: Union[Path, str]) -> Path:
    """
    Save story memory to a JSON file, creating parent directories as needed.

    Args:
        memory: The store to save
        path: Destination file

    Returns:
        Path to the saved file
    """
    filepath = Path(path)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    data = {"version": SNAPSHOT_VERSION}
    data.update(memory.to_dict())
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    logger.info(f"Saved story memory to: {filepath}")
    return filepath


def load_story_memory(path: Union[Path, str]) -> StoryMemory:
    """
    Load story memory from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        StoryMemoryLoadError: If the file is not a readable snapshot or was
            written by an unsupported version
    """
    filepath = Path(path)
    if not filepath.exists():
        raise FileNotFoundError(f"Story memory file not found: {filepath}")

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise StoryMemoryLoadError(f"Could not read story memory {filepath}: {e}") from e

    if not isinstance(data, dict):
        raise StoryMemoryLoadError(f"Story memory {filepath} is not a JSON object")
    version = data.get("version")
    if version != SNAPSHOT_VERSION:
        raise StoryMemoryLoadError(f"Unsupported story memory version {version!r} in {filepath}")

    try:
        memory = StoryMemory.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise StoryMemoryLoadError(f"Malformed story memory {filepath}: {e}") from e

    logger.info(f"Loaded story memory: {len(memory.entities)} entities, {len(memory.facts)} facts")
    return memory
