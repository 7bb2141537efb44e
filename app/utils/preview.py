"""
Preview Utility - decide how a resource is shown in-site.

Preview kinds:
- youtube (watch / youtu.be link, rendered through the embed URL)
- video   (resource_type "video" or a .mp4/.webm/.ogg URL)
- iframe  (PDFs, web pages, anything else with a URL)
- none    (no link and no stored file)

Signed URLs for stored files are issued by the storage provider, so for
file-backed resources the storage path is returned and the client signs it.
"""

import re
from typing import Optional

VIDEO_EXTENSIONS = {'.mp4', '.webm', '.ogg'}
YOUTUBE_EMBED_BASE = "https://www.youtube.com/embed/"

_YOUTUBE_PATTERN = re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/)([\w-]+)", re.IGNORECASE)


def get_file_extension(url: str) -> str:
    """Get lowercase file extension, ignoring any query string."""
    path = url.split('?', 1)[0]
    filename = path.rsplit('/', 1)[-1]
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def is_video_file(url: str) -> bool:
    return get_file_extension(url) in VIDEO_EXTENSIONS


def get_youtube_embed_url(url: str) -> Optional[str]:
    """Convert a YouTube watch/short link to its embed URL, or None."""
    match = _YOUTUBE_PATTERN.search(url)
    if not match:
        return None
    return YOUTUBE_EMBED_BASE + match.group(1)


def get_preview_url(resource: dict) -> Optional[str]:
    """External link wins over the stored file path."""
    return resource.get("external_link") or resource.get("file_path") or None


def resolve_preview(resource: dict) -> dict:
    """
    Build the preview descriptor for a resource.

    Returns:
        {"kind", "url", "embed_url", "title"}
    """
    url = get_preview_url(resource)
    title = resource.get("title") or "Resource"

    if not url:
        return {"kind": "none", "url": None, "embed_url": None, "title": title}

    video_file = is_video_file(url)

    embed_url = None if video_file else get_youtube_embed_url(url)
    if embed_url:
        return {"kind": "youtube", "url": url, "embed_url": embed_url, "title": title}

    if video_file or resource.get("resource_type") == "video":
        return {"kind": "video", "url": url, "embed_url": None, "title": title}

    return {"kind": "iframe", "url": url, "embed_url": None, "title": title}
