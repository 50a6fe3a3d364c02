"""
Image index builder.

Lists the product photos kept in the catalog's GitHub repository and
produces the `{"images": {category: {key: url}}}` document the catalog
reads from its `images` node.
"""
import re
from pathlib import PurePosixPath
from typing import Dict, Iterable

import httpx

from storefront.logging import get_logger

logger = get_logger(__name__)

GITHUB_API_URL = "https://api.github.com"

DEFAULT_FOLDERS = (
    "cuadros",
    "juguetes",
    "cajitas",
    "rompecabezas",
    "rotulos",
    "aviones",
    "casitas",
)

# Characters the Realtime Database does not accept in keys
_INVALID_KEY_CHARS = re.compile(r"[.$#\[\]/]")


def image_key(file_name: str) -> str:
    """Database key for an image file: its name without extension."""
    return _INVALID_KEY_CHARS.sub("_", PurePosixPath(file_name).stem)


def raw_url(download_url: str) -> str:
    return f"{download_url}?raw=true"


def parse_folder_listing(entries: Iterable[dict]) -> Dict[str, str]:
    """Map key -> URL for every downloadable file in a contents listing."""
    images: Dict[str, str] = {}
    for entry in entries:
        download_url = entry.get("download_url")
        if not download_url:
            continue
        key = image_key(entry.get("name", ""))
        if key in images:
            logger.warning(f"Duplicate image key {key!r}: {entry.get('name')} replaces {images[key]}")
        images[key] = raw_url(download_url)
    return images


def fetch_folder(client: httpx.Client, owner: str, repo: str, folder: str, branch: str = "main") -> Dict[str, str]:
    """
    List one product folder.

    Raises:
        httpx.HTTPError: If GitHub cannot be reached or answers with an error
    """
    response = client.get(
        f"{GITHUB_API_URL}/repos/{owner}/{repo}/contents/productos/{folder}",
        params={"ref": branch},
    )
    response.raise_for_status()
    entries = response.json()
    if not isinstance(entries, list):
        raise ValueError(f"productos/{folder} is not a directory")
    return parse_folder_listing(entries)


def build_image_index(
    client: httpx.Client,
    owner: str,
    repo: str,
    folders: Iterable[str] = DEFAULT_FOLDERS,
    branch: str = "main",
) -> dict:
    """Index for every folder, in the order given."""
    index: Dict[str, Dict[str, str]] = {}
    for folder in folders:
        index[folder] = fetch_folder(client, owner, repo, folder, branch)
        logger.info(f"{folder}: {len(index[folder])} image(s)")
    return {"images": index}
