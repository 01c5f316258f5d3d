# viewloader/core/templating/helpers.py
"""
Helper functions available to every compiled template.

TEMPLATE_FUNCS is one shared table; engines install it as-is and never
rebuild it per template. The router (url) and the translator (msg) are
outside collaborators installed with configure_helpers().
"""
import datetime as dt
import re
from collections.abc import Mapping, MutableMapping
from typing import Any, Callable, Dict, Optional

from markupsafe import Markup, escape
import structlog

from viewloader.config.settings import (
    DEFAULT_DATE_FORMAT,
    DEFAULT_DATETIME_FORMAT,
    DEFAULT_ERROR_CLASS,
)
from viewloader.core.templating.forms import Field
from viewloader.exceptions import HelperError

log = structlog.get_logger(__name__)

CURRENT_LOCALE_RENDER_ARG = "currentLocale"

UrlReverser = Callable[..., str]
MessageTranslator = Callable[..., str]

_invalid_slug_pattern = re.compile(r"[^a-z0-9 _-]")
_white_space_pattern = re.compile(r"\s+")


def _default_message_translator(locale: str, message: str, *args: Any) -> str:
    return message % args if args else message


_hooks: Dict[str, Any] = {
    "date_format": DEFAULT_DATE_FORMAT,
    "datetime_format": DEFAULT_DATETIME_FORMAT,
    "error_class": DEFAULT_ERROR_CLASS,
    "url_reverser": None,
    "message_translator": _default_message_translator,
}

def configure_helpers(
    date_format: Optional[str] = None,
    datetime_format: Optional[str] = None,
    error_class: Optional[str] = None,
    url_reverser: Optional[UrlReverser] = None,
    message_translator: Optional[MessageTranslator] = None,
) -> None:
    # installs formats and outside collaborators. None leaves a setting unchanged.
    updates = {
        "date_format": date_format,
        "datetime_format": datetime_format,
        "error_class": error_class,
        "url_reverser": url_reverser,
        "message_translator": message_translator,
    }
    _hooks.update({k: v for k, v in updates.items() if v is not None})


def reverse_url(*args: Any) -> str:
    """
    Returns a url capable of invoking a given controller method:
    "Application.ShowApp 123" => "/app/123"
    """
    if not args:
        raise HelperError("no arguments provided to reverse route")
    action = args[0]
    if not isinstance(action, str) or len(action.split(".")) != 2:
        raise HelperError(f"reversing '{action}', expected 'Controller.Action'")
    reverser = _hooks["url_reverser"]
    if reverser is None:
        raise HelperError(f"reversing {action}: no url reverser configured")
    try:
        return reverser(action, *args[1:])
    except HelperError:
        raise
    except Exception as e:
        raise HelperError(f"reversing {action}: {e}") from e

def equal(a: Any, b: Any) -> bool:
    # bools only equal bools; 1 and 1.0 are equal.
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a is b
    return a == b

def set_arg(render_args: MutableMapping[str, Any], key: str, value: Any) -> Markup:
    render_args[key] = value
    return Markup("")

def append_arg(render_args: MutableMapping[str, Any], key: str, value: Any) -> Markup:
    if render_args.get(key) is None:
        render_args[key] = [value]
    else:
        render_args[key].append(value)
    return Markup("")

def new_field(name: str, render_args: Mapping[str, Any]) -> Field:
    return Field(name, render_args)

def option(f: Field, val: str, label: str) -> Markup:
    selected = " selected" if f.flash() == val else ""
    return Markup('<option value="%s"%s>%s</option>' % (escape(val), selected, escape(label)))

def radio(f: Field, val: str) -> Markup:
    checked = " checked" if f.flash() == val else ""
    return Markup('<input type="radio" name="%s" value="%s"%s>' % (escape(f.name), escape(val), checked))

def checkbox(f: Field, val: str) -> Markup:
    checked = " checked" if f.flash() == val else ""
    return Markup('<input type="checkbox" name="%s" value="%s"%s>' % (escape(f.name), escape(val), checked))

def pad(text: str, width: int) -> Markup:
    """Pads the given string with &nbsp;'s up to the given width."""
    text = str(text)
    if len(text) >= width:
        return Markup(escape(text))
    return Markup(str(escape(text)) + "&nbsp;" * (width - len(text)))

def error_class(name: str, render_args: Mapping[str, Any]) -> Markup:
    errors = render_args.get("errors")
    if not isinstance(errors, Mapping):
        log.warning("error_class_called_without_errors_render_arg", field=name)
        return Markup("")
    if errors.get(name) is None:
        return Markup("")
    return Markup(_hooks["error_class"])

def msg(render_args: Mapping[str, Any], message: str, *args: Any) -> Markup:
    locale = render_args.get(CURRENT_LOCALE_RENDER_ARG, "")
    return Markup(_hooks["message_translator"](locale, message, *args))

def nl2br(text: str) -> Markup:
    """Replaces newlines with <br>."""
    return Markup(str(escape(text)).replace("\n", "<br>"))

def raw(text: str) -> Markup:
    """Skips sanitation on the parameter. Do not use with dynamic data."""
    return Markup(text)

def pluralize(items: Any, singular: str = "", plural: str = "s") -> str:
    """
    Picks the singular or plural suffix for data of dynamic length.

    items is a list/tuple/set, or an int counting the items.
    """
    if isinstance(items, int) and not isinstance(items, bool):
        if items != 1:
            return plural
    elif isinstance(items, (list, tuple, set, frozenset)):
        if len(items) != 1:
            return plural
    else:
        log.error("pluralize_unexpected_type", type=type(items).__name__)
    return singular

def date(value: dt.date) -> str:
    return value.strftime(_hooks["date_format"])

def datetime(value: dt.datetime) -> str:
    return value.strftime(_hooks["datetime_format"])

def slug(text: str) -> str:
    separator = "-"
    text = text.lower()
    text = _invalid_slug_pattern.sub("", text)
    text = _white_space_pattern.sub(separator, text)
    return text.strip(separator)


# The functions available for use in the templates.
TEMPLATE_FUNCS: Dict[str, Callable[..., Any]] = {
    "url": reverse_url,
    "eq": equal,
    "set": set_arg,
    "append": append_arg,
    "field": new_field,
    "option": option,
    "radio": radio,
    "checkbox": checkbox,
    "pad": pad,
    "errorClass": error_class,
    "msg": msg,
    "nl2br": nl2br,
    "raw": raw,
    "pluralize": pluralize,
    "date": date,
    "datetime": datetime,
    "slug": slug,
}

# helpers that read naturally as filters: {{ title|slug }}
FILTER_NAMES = ("pad", "nl2br", "raw", "pluralize", "date", "datetime", "slug")
