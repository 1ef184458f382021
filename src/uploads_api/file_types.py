"""
Static extension tables shared by the upload and listing paths.

One table maps an extension to its MIME type, the other to a display
category. Both are keyed by lower-case extension without the leading dot.
"""

from enum import Enum
from pathlib import PurePosixPath
from typing import Dict

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class FileCategory(str, Enum):
    """Display category of a stored file."""
    IMAGE = "image"
    PDF = "pdf"
    DOCUMENT = "document"
    SPREADSHEET = "spreadsheet"
    PRESENTATION = "presentation"
    ARCHIVE = "archive"
    AUDIO = "audio"
    VIDEO = "video"
    TEXT = "text"
    CODE = "code"
    GENERIC = "generic"


CONTENT_TYPES: Dict[str, str] = {
    # images
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "bmp": "image/bmp",
    "svg": "image/svg+xml",
    "ico": "image/x-icon",
    # documents
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "odt": "application/vnd.oasis.opendocument.text",
    "rtf": "application/rtf",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "ods": "application/vnd.oasis.opendocument.spreadsheet",
    "csv": "text/csv",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "odp": "application/vnd.oasis.opendocument.presentation",
    # archives
    "zip": "application/zip",
    "rar": "application/vnd.rar",
    "7z": "application/x-7z-compressed",
    "tar": "application/x-tar",
    "gz": "application/gzip",
    # audio / video
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    "flac": "audio/flac",
    "mp4": "video/mp4",
    "mov": "video/quicktime",
    "avi": "video/x-msvideo",
    "webm": "video/webm",
    "mkv": "video/x-matroska",
    # text / code
    "txt": "text/plain",
    "md": "text/markdown",
    "log": "text/plain",
    "html": "text/html",
    "css": "text/css",
    "js": "text/javascript",
    "json": "application/json",
    "xml": "application/xml",
    "py": "text/x-python",
    "yaml": "application/yaml",
    "yml": "application/yaml",
}

CATEGORIES: Dict[str, FileCategory] = {
    **dict.fromkeys(("jpg", "jpeg", "png", "gif", "webp", "bmp", "svg", "ico"), FileCategory.IMAGE),
    "pdf": FileCategory.PDF,
    **dict.fromkeys(("doc", "docx", "odt", "rtf"), FileCategory.DOCUMENT),
    **dict.fromkeys(("xls", "xlsx", "ods", "csv"), FileCategory.SPREADSHEET),
    **dict.fromkeys(("ppt", "pptx", "odp"), FileCategory.PRESENTATION),
    **dict.fromkeys(("zip", "rar", "7z", "tar", "gz"), FileCategory.ARCHIVE),
    **dict.fromkeys(("mp3", "wav", "ogg", "flac"), FileCategory.AUDIO),
    **dict.fromkeys(("mp4", "mov", "avi", "webm", "mkv"), FileCategory.VIDEO),
    **dict.fromkeys(("txt", "md", "log"), FileCategory.TEXT),
    **dict.fromkeys(("html", "css", "js", "json", "xml", "py", "yaml", "yml"), FileCategory.CODE),
}

ICONS: Dict[FileCategory, str] = {
    FileCategory.IMAGE: "🖼️",
    FileCategory.PDF: "📕",
    FileCategory.DOCUMENT: "📝",
    FileCategory.SPREADSHEET: "📊",
    FileCategory.PRESENTATION: "📽️",
    FileCategory.ARCHIVE: "🗜️",
    FileCategory.AUDIO: "🎵",
    FileCategory.VIDEO: "🎬",
    FileCategory.TEXT: "📄",
    FileCategory.CODE: "💻",
    FileCategory.GENERIC: "📁",
}


def get_extension(filename: str) -> str:
    """Return the lower-case extension of `filename` without the dot ('' if none)."""
    return PurePosixPath(filename).suffix.lstrip(".").lower()


def content_type_for(filename: str) -> str:
    return CONTENT_TYPES.get(get_extension(filename), DEFAULT_CONTENT_TYPE)


def category_for(filename: str) -> FileCategory:
    return CATEGORIES.get(get_extension(filename), FileCategory.GENERIC)


def icon_for(filename: str) -> str:
    return ICONS[category_for(filename)]


def is_image(filename: str) -> bool:
    return category_for(filename) is FileCategory.IMAGE
