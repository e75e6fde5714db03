import asyncio
import base64
import logging
from io import BytesIO
from urllib.parse import unquote_to_bytes

import requests
from PIL import Image

from leaderboard_config import AVATAR_TIMEOUT, USER_AGENT

log = logging.getLogger(__name__)


def read_image_bytes(source: str, timeout=AVATAR_TIMEOUT) -> bytes:
    """Read raw image bytes from an http(s) URL, a data: URI or a local path."""
    if source.startswith(("http://", "https://")):
        response = requests.get(source, timeout=timeout, headers={"User-Agent": USER_AGENT})
        response.raise_for_status()
        return response.content
    if source.startswith("data:"):
        header, _, payload = source.partition(",")
        if header.endswith(";base64"):
            return base64.b64decode(payload)
        return unquote_to_bytes(payload)
    with open(source, "rb") as f:
        return f.read()


def decode_image(data: bytes) -> Image.Image:
    image = Image.open(BytesIO(data))
    image.load()
    return image.convert("RGBA")


def load_avatar_sync(source: str, timeout=AVATAR_TIMEOUT) -> Image.Image:
    image = decode_image(read_image_bytes(source, timeout))
    log.debug("Loaded avatar %s (%dx%d)", source[:80], image.width, image.height)
    return image


async def load_avatar(source: str, timeout=AVATAR_TIMEOUT) -> Image.Image:
    # requests and Pillow both block, keep them off the event loop
    return await asyncio.to_thread(load_avatar_sync, source, timeout)
