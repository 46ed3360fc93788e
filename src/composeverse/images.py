"""Image provider backed by PNG files under resources/."""

import logging
from functools import cache
from pathlib import Path

logger = logging.getLogger(__name__)

_ROOT = Path(__file__).parent.parent.parent
RESOURCE_DIR = _ROOT / "resources"


@cache
def load_image(resource: str) -> bytes | None:
    """PNG bytes for `resource`, or None when no such file ships with the app."""
    path = RESOURCE_DIR / f"{resource}.png"
    if not path.is_file():
        logger.debug("No image for resource %r at %s", resource, path)
        return None
    return path.read_bytes()
