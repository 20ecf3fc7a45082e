from pathlib import Path
import logging

import requests

DEFAULT_BASE_URL = "https://raw.githubusercontent.com/ScottSauers/Needleman-Wunsch-Aligner/main/"


class FetchError(RuntimeError):
    ...


def ensure_file(p: Path, base_url: str = DEFAULT_BASE_URL, timeout: float = 60.0) -> Path:
    """Makes sure p exists locally, downloading it from base_url + its name otherwise"""
    logger = logging.getLogger("fetch.py")
    if p.exists():
        logger.info(f"File '{p}' already exists.")
        return p
    url = base_url.rstrip('/') + '/' + p.name
    logger.info(f"File '{p}' not found. Downloading {url}")
    r = requests.get(url, timeout=timeout)
    if not r.ok:
        raise FetchError(f"Failed to download file '{p}'. HTTP Status: {r.status_code}")
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(r.text)
    logger.info(f"File '{p}' downloaded successfully.")
    return p
