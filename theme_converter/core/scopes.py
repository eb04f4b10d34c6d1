"""Token scope lookup for renderers.

Matching is deliberately simple: a rule matches a name when one of its
scopes equals the name exactly. A name ending in '.*' also matches a scope
equal to the part before '.*' (so 'keyword.operator.*' matches a rule for
'keyword.operator'). There is no prefix or selector matching.
"""

from collections.abc import Iterable

from theme_converter.core.types import TokenRule


def match_scope(scopes: str | Iterable[str], name: str) -> bool:
    if isinstance(scopes, str):
        scopes = [scopes]
    base = name.split('.*')[0] if '.*' in name else name
    return any(scope == name or scope == base for scope in scopes)


def find_rule(rules: Iterable[TokenRule], name: str) -> TokenRule | None:
    """First rule whose scopes match *name*. Rule order decides ties."""
    for rule in rules:
        if match_scope(rule.scope, name):
            return rule
    return None
