# viewloader/core/diagnostics.py
"""
Turns raw parser failures into line-accurate TemplateError records.
"""
import re
from typing import List, Optional, Tuple
import structlog

from viewloader.exceptions import TemplateError

log = structlog.get_logger(__name__)

COMPILATION_ERROR_TITLE = "Template Compilation Error"
PANIC_TITLE = "Panic (Template Loader)"

_LINE_MARKER = re.compile(r":\d+:")

def parse_template_error(message: str) -> Tuple[str, int, str]:
    """
    Extracts (template name, line, description) from messages like
    ``html/template:Application/Register.html:36: no such template "footer.html"``.

    Best effort: without a ``:<digits>:`` marker the line is 0 and the whole
    message is the description.
    """
    match = _LINE_MARKER.search(message)
    if match is None:
        return "", 0, message
    line = int(message[match.start() + 1:match.end() - 1])
    template_name = message[:match.start()]
    colon = template_name.rfind(":")
    if colon != -1:
        template_name = template_name[colon + 1:]
    description = message[match.end() + 1:]
    return template_name.strip(), line, description

def compilation_error(
    name: str,
    source: str,
    description: str,
    line: Optional[int] = None,
) -> TemplateError:
    # builds the standard per-template error; line is parsed out of the message when not given.
    if line is None:
        _, line, description = parse_template_error(description)
    source_lines: List[str] = source.split("\n")
    log.error("template_compilation_error", template=name, line=line, description=description)
    return TemplateError(
        title=COMPILATION_ERROR_TITLE,
        path=name,
        description=description,
        line=line if line else -1,
        source_lines=source_lines,
    )

def panic_error(name: str, fault: BaseException, fatal: bool = False) -> TemplateError:
    # a fault inside an engine, converted at the compile boundary.
    log.error("template_loader_panic", template=name, fault=repr(fault), fatal=fatal)
    return TemplateError(
        title=PANIC_TITLE,
        path=name,
        description=f"{type(fault).__name__}: {fault}",
        fatal=fatal,
    )
