import re

from django import template

register = template.Library()

_WORD_START = re.compile(r"(^|\s)(\w)")


def to_title_case(value):
    """Lowercase everything, then capitalize the first letter of each whitespace-delimited word."""
    return _WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), str(value).lower())


@register.filter
def title_case(value):
    if value is None:
        return ""
    return to_title_case(value)


@register.filter
def cell_class(clue):
    """CSS class for a body cell in its current reveal state."""
    if clue is None:
        return ""
    return "answer" if clue.showing.value == "answer" else ""
