import os
from pathlib import Path
from typing import List

import structlog

log = structlog.get_logger(__name__)
utf8_bom = b"\xef\xbb\xbf"

def strip_utf8_bom(data: bytes) -> bytes:
    # removes the utf-8 byte order mark from byte data if present.
    if data.startswith(utf8_bom):
        return data[len(utf8_bom):]
    return data

def read_template_source(path: str) -> str:
    # opens, fully reads and closes a template file. raises OSError.
    with open(path, "rb") as f_obj:
        data = f_obj.read()
    return strip_utf8_bom(data).decode("utf-8", errors="replace")

def read_lines(path: str) -> List[str]:
    return read_template_source(path).split("\n")

def template_extension(path: str) -> str:
    # ".html" for "views/App/Index.html", "" for "views/README".
    return Path(path).suffix.lower()

def to_logical_name(name: str) -> str:
    # logical names always use forward slashes, even on windows.
    if os.sep != "/":
        name = name.replace(os.sep, "/")
    return name
