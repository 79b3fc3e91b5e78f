"""Literal text substitutions applied to the raw source before parsing."""

from collections.abc import Iterable

from oas_convert.config import TextReplacement

# Vendor terminology found in Swagger 2.0 sources, fixed on every run.
BUILTIN_REPLACEMENTS: list[TextReplacement] = [
    TextReplacement(find="environments(endpoints)", replace="endpoints"),
    TextReplacement(find="environment(endpoint)", replace="endpoint"),
]


def apply_text_replacements(raw: str, extra: Iterable[TextReplacement] = ()) -> str:
    """Replace every literal occurrence of each ``find`` with its ``replace``.

    Built-in replacements run first, then ``extra`` in order. Each pass sees
    the output of the previous one, so replacements compose.
    """
    for rule in [*BUILTIN_REPLACEMENTS, *extra]:
        if not rule.find:
            continue
        raw = raw.replace(rule.find, rule.replace)
    return raw
