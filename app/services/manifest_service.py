"""HLS manifest helpers — detect manifests and anchor their references at the origin."""
from __future__ import annotations

from urllib.parse import urlparse

MANIFEST_EXTENSION = ".m3u8"
MANIFEST_CONTENT_MARKERS = ("mpegurl", "m3u8")


def is_manifest_url(url: str) -> bool:
    return urlparse(url).path.lower().endswith(MANIFEST_EXTENSION)


def is_manifest_content_type(content_type: str | None) -> bool:
    content_type = (content_type or "").lower()
    return any(marker in content_type for marker in MANIFEST_CONTENT_MARKERS)


def _is_absolute(line: str) -> bool:
    lower = line.lower()
    return lower.startswith("http://") or lower.startswith("https://")


def rewrite_manifest(text: str, origin_url: str) -> str:
    """Make every segment / sub-playlist reference in *text* absolute.

    ``/path`` lines get the origin's scheme and host; other relative lines
    get the origin's directory.  Tags, blank lines and absolute URLs are
    kept as-is.  Lines are re-joined with ``\\n``.
    """
    parsed = urlparse(origin_url)
    root = f"{parsed.scheme}://{parsed.netloc}"
    path = parsed.path or "/"
    directory = root + path[: path.rfind("/") + 1]

    out = []
    for line in text.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        ref = line.strip()
        if not ref or ref.startswith("#") or _is_absolute(ref):
            out.append(line)
        elif ref.startswith("/"):
            out.append(root + ref)
        else:
            out.append(directory + ref)
    return "\n".join(out)
