from collections.abc import Mapping
from typing import Any

ERRORS_RENDER_ARG = "errors"
FLASH_RENDER_ARG = "flash"

class Field:
    # a form field bound to the render args: its value, flash value and validation error.

    def __init__(self, name: str, render_args: Mapping):
        self.name = name
        self.render_args = render_args
        errors = render_args.get(ERRORS_RENDER_ARG)
        self.error = errors.get(name) if isinstance(errors, Mapping) else None

    @property
    def id(self) -> str:
        return self.name.replace(".", "_")

    def value(self) -> Any:
        # walks dotted names: "user.name" -> render_args["user"]["name"] or .name
        current: Any = self.render_args
        for part in self.name.split("."):
            if isinstance(current, Mapping):
                current = current.get(part)
            else:
                current = getattr(current, part, None)
            if current is None:
                return None
        return current

    def flash(self) -> str:
        flash = self.render_args.get(FLASH_RENDER_ARG)
        if isinstance(flash, Mapping):
            return str(flash.get(self.name, ""))
        return ""

    @property
    def error_class(self) -> str:
        from viewloader.core.templating.helpers import error_class
        return str(error_class(self.name, self.render_args))

    def __repr__(self) -> str:
        return f"Field({self.name!r})"
