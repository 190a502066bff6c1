import json, os
from pathlib import Path

from services.texts import get_static_text

_PASSAGES_FILE = Path("assets/texts/passages.json")


def ensure_app_files(root: str = "."):
    os.makedirs(os.path.join(root, "data"), exist_ok=True)
    texts_dir = os.path.join(root, "assets", "texts")
    os.makedirs(texts_dir, exist_ok=True)
    passages = os.path.join(texts_dir, "passages.json")
    if not os.path.exists(passages):
        with open(passages, "w", encoding="utf-8") as f:
            json.dump({}, f, indent=2)


def load_passages(path: Path = _PASSAGES_FILE) -> dict:
    """Extra topic -> passage pairs; unreadable or malformed files count as empty."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(k): str(v).strip() for k, v in data.items() if str(v).strip()}


def load_text_file(path, topic: str = "") -> str:
    """Passage from a plain text file, or the catalog text for ``topic``."""
    try:
        text = Path(path).read_text(encoding="utf-8").strip().replace("\r\n", "\n")
    except OSError:
        return get_static_text(topic)
    return text or get_static_text(topic)


def load_reference_text(topic: str, path: Path = _PASSAGES_FILE) -> str:
    return load_passages(path).get(topic) or get_static_text(topic)
