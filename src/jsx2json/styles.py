"""
Inline style parsing.

Converts the text of a ``style="..."`` attribute into a mapping of
property name to value, the shape component libraries expect:

    "color: red; margin: 0 auto"  ->  {"color": "red", "margin": "0 auto"}

Names are kept as written. Values are serialized back from the CSS
tokens and stripped. Invalid declarations and empty values are skipped.
"""

from typing import Dict

import tinycss2


def parse_style(css_text: str) -> Dict[str, str]:
    styles: Dict[str, str] = {}
    if not css_text or not css_text.strip():
        return styles

    declarations = tinycss2.parse_declaration_list(
        css_text, skip_comments=True, skip_whitespace=True
    )
    for declaration in declarations:
        if declaration.type != "declaration":
            continue
        value = tinycss2.serialize(declaration.value).strip()
        if not value:
            continue
        if declaration.important:
            value = f"{value} !important"
        styles[declaration.name] = value
    return styles


__all__ = ["parse_style"]
