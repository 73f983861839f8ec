"""Base URL normalization for discovered OpenAI-compatible endpoints.

A GenAI service may hand out a base URL that ends in the model's own path
segment (``https://proxy/OpenAI-GPT5-2-81a4d41``). Goose talks to it through
the OpenAI wire format, which lives under ``/openai`` on the proxy root.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

OPENAI_SUFFIX = "/openai"

_UPPER_ALNUM_RUN = re.compile(r"[A-Z0-9-]+")


def looks_like_model_segment(segment: str, model: str | None) -> bool:
    """Whether a path segment looks like an embedded model identifier."""
    if "-" not in segment:
        return False
    if "GPT" in segment or "OpenAI" in segment:
        return True
    if _UPPER_ALNUM_RUN.search(segment):
        return True
    return bool(model) and (model in segment or segment in model)


def strip_model_segment(url: str, model: str | None) -> str:
    """Drop a trailing model-identifier segment, keeping scheme and authority.

    Raises ValueError if ``url`` is not an absolute URL.
    """
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"not an absolute URL: {url!r}")
    _ = parts.port  # raises ValueError on a malformed port

    path = parts.path
    if not path or path == "/":
        return url

    segments = path.rstrip("/").split("/")
    if not looks_like_model_segment(segments[-1], model):
        return url

    leading = [s for s in segments[:-1] if s]
    new_path = "/" + "/".join(leading) if leading else "/"
    logger.debug("Removed model segment '%s' from base URL", segments[-1])
    return f"{parts.scheme}://{parts.netloc}{new_path}"


def append_openai_suffix(url: str) -> str:
    """Append ``/openai`` unless the URL already contains it."""
    if OPENAI_SUFFIX in url:
        return url
    if not url.endswith("/"):
        url += "/"
    return url + OPENAI_SUFFIX.lstrip("/")


def normalize_base_url(url: str, model: str | None) -> str:
    """Turn a discovered base URL into the proxy's OpenAI-compatible root.

    A URL that cannot be parsed is kept as-is for the stripping step; the
    ``/openai`` suffix is still applied.
    """
    try:
        stripped = strip_model_segment(url, model)
    except ValueError as e:
        logger.warning("Failed to parse base URL %s: %s", url, e)
        stripped = url
    return append_openai_suffix(stripped)
