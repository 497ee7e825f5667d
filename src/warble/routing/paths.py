"""Action path helpers.

Actions are slash-delimited paths. A route tree addresses them either
absolutely (``/shop/cart``) or relative to the scope a nested router was
entered at (``cart`` inside ``/shop``).

Examples::

    normalize_path("shop/")            -> "/shop"
    make_absolute("cart", "/shop")     -> "/shop/cart"
    make_absolute("/help", "/shop")    -> "/help"
    make_relative("/shop/cart", "/shop") -> "cart"
"""

import re

WILDCARD = "/*"

_TOKEN = re.compile(r":(\w+)|\*")


def normalize_path(path: str) -> str:
    """Ensure a single leading slash and strip one trailing slash.

    The root path ``"/"`` normalizes to ``""``, which only matches the root.
    """
    if not path.startswith("/"):
        path = f"/{path}"
    return path.removesuffix("/")


def make_absolute(action: str, scope: str) -> str:
    """Resolve *action* against *scope*. Absolute actions pass through."""
    if action.startswith("/"):
        return action
    if scope in ("", "/"):
        return f"/{action}"
    return f"{scope.rstrip('/')}/{action}"


def make_relative(action: str, scope: str) -> str:
    """Express an absolute *action* relative to *scope* when it lies beneath it."""
    if scope in ("", "/") or not action.startswith("/"):
        return action
    prefix = f"{scope.rstrip('/')}/"
    if action.startswith(prefix):
        return action[len(prefix):]
    return action


def compose_path(scope: str, route_path: str, *, keep_wildcard: bool = False) -> str:
    """Join a scope with a route path.

    Wildcard segments drop out unless *keep_wildcard* is set, so a
    router mounted at ``/*`` keeps its parent's scope.
    """
    if not keep_wildcard:
        route_path = route_path.replace(WILDCARD, "", 1)
    base = "" if scope == "/" else scope
    return f"{base}{route_path}" or "/"


def compile_path(path: str, *, end: bool = True) -> re.Pattern[str]:
    """Compile a normalized route path into a case-insensitive regex.

    ``:name`` matches one segment, ``*`` matches anything. A trailing
    slash on the subject is optional. With ``end=False`` only a prefix
    must match, and it must stop at a segment boundary::

        compile_path("/shop", end=False).match("/shop/cart")  # match
        compile_path("/shop", end=False).match("/shopping")   # None
    """
    parts: list[str] = []
    pos = 0
    for token in _TOKEN.finditer(path):
        parts.append(re.escape(path[pos : token.start()]))
        parts.append("([^/]+?)" if token.group(1) else "(.*)")
        pos = token.end()
    parts.append(re.escape(path[pos:]))
    body = "".join(parts)

    if end:
        return re.compile(f"^{body}/?$", re.IGNORECASE)
    return re.compile(f"^{body}(?:/(?=$))?(?=/|$)", re.IGNORECASE)


def resolve_action(action: str | None, scope: str) -> str | None:
    """Express *action* relative to *scope*, or ``None`` if it isn't addressed there.

    The result keeps its leading slash. The root scope never strips::

        resolve_action("shop/cart", "/")     -> "/shop/cart"
        resolve_action("/shop/cart", "/shop") -> "/cart"
        resolve_action("/help", "/shop")      -> None
        resolve_action("/shop", "/shop")      -> None
    """
    if not action:
        return None
    if not action.startswith("/"):
        action = f"/{action}"
    if scope in ("", "/"):
        return action
    if action.startswith(f"{scope}/"):
        return action[len(scope) :]
    return None
