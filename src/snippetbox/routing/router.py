"""Compiled router with trie-based path matching.

Routes are registered during setup and compiled into an immutable
lookup structure when the app freezes. At each level a static segment
is tried before the parameter edge, and the parameter edge before a
catch-all, so ``/snippet/create`` wins over ``/snippet/{id}``.

A route registered for ``GET`` also answers ``HEAD``.
"""

import re
from dataclasses import dataclass

from snippetbox.errors import HTTPError, MethodNotAllowed, NotFound
from snippetbox.http.request import Request
from snippetbox.http.response import Response
from snippetbox.middleware.protocol import Handler
from snippetbox.routing.route import PathSegment, Route, RouteMatch

# Regex for each supported parameter type
CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"[0-9]+",
    "path": r".+",
}


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/"                   -> []
        "/snippet/view/{id}"  -> [PathSegment("snippet"), PathSegment("view"),
                                  PathSegment("{id}", is_param=True, ...)]
        "/static/{filepath:path}" -> [..., PathSegment("{filepath:path}", param_type="path")]
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            if ":" in inner:
                param_name, param_type = inner.split(":", 1)
            else:
                param_name = inner
                param_type = "str"
            if param_type not in CONVERTERS:
                msg = f"Unknown parameter type {param_type!r} in route {path!r}"
                raise ValueError(msg)
            segments.append(
                PathSegment(
                    value=part,
                    is_param=True,
                    param_name=param_name,
                    param_type=param_type,
                )
            )
        else:
            segments.append(PathSegment(value=part))
    return segments


def _split(path: str) -> list[str]:
    # "/" -> [], "/a/b" -> ["a", "b"], "/a/" -> ["a", ""]
    if path in ("", "/"):
        return []
    return path[1:].split("/") if path.startswith("/") else path.split("/")


class _TrieNode:
    """A node in the route trie. Mutable during compilation only."""

    __slots__ = ("catch_all", "children", "param_child", "routes_by_method")

    def __init__(self) -> None:
        # Static segment children: "snippet" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single parameter child (only one param pattern per level)
        self.param_child: _ParamEdge | None = None
        # Catch-all edge (path converter)
        self.catch_all: _CatchAllEdge | None = None
        # Routes at this node, keyed by HTTP method
        self.routes_by_method: dict[str, Route] = {}


@dataclass(slots=True)
class _ParamEdge:
    """A parameter edge in the trie."""

    param_name: str
    regex: re.Pattern[str]
    node: _TrieNode


@dataclass(slots=True)
class _CatchAllEdge:
    """A catch-all edge, consuming the rest of the path."""

    param_name: str
    node: _TrieNode


class Router:
    """Compiled router with trie-based path matching.

    Also the dispatcher: calling the router with a request runs the
    matched route's handler, or answers 404/405.

    Usage::

        router = Router()
        router.add(Route("/ping", ping_handler, frozenset({"GET"})))
        router.add(Route("/snippet/view/{id}", view_handler, frozenset({"GET"})))
        router.compile()
        response = await router(request)
    """

    __slots__ = ("_compiled", "_not_found", "_root")

    def __init__(self, not_found: Handler | None = None) -> None:
        self._root = _TrieNode()
        self._compiled = False
        self._not_found = not_found

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        node = self._root
        for seg in parse_path(route.path):
            if seg.is_param and seg.param_type == "path":
                # Catch-all: consumes rest of path, must be last segment
                if node.catch_all is None:
                    node.catch_all = _CatchAllEdge(
                        param_name=seg.param_name or "path", node=_TrieNode()
                    )
                node = node.catch_all.node
                break

            if seg.is_param:
                if node.param_child is None:
                    node.param_child = _ParamEdge(
                        param_name=seg.param_name or "",
                        regex=re.compile(f"^{CONVERTERS[seg.param_type]}$"),
                        node=_TrieNode(),
                    )
                elif node.param_child.param_name != seg.param_name:
                    msg = (
                        f"Route {route.path!r} conflicts with an existing parameter "
                        f"{{{node.param_child.param_name}}} at the same position."
                    )
                    raise ValueError(msg)
                node = node.param_child.node
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        for method in route.methods:
            if method in node.routes_by_method:
                msg = f"Duplicate route: {method} {route.path!r}"
                raise ValueError(msg)
            node.routes_by_method[method] = route

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against compiled routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        result = self._match_node(self._root, _split(path), 0, {})
        if result is None:
            raise NotFound(f"No route matches {method} {path!r}")

        node, params = result
        routes = node.routes_by_method
        if method in routes:
            return RouteMatch(route=routes[method], path_params=params)
        if method == "HEAD" and "GET" in routes:
            return RouteMatch(route=routes["GET"], path_params=params)

        allowed = set(routes)
        if "GET" in allowed:
            allowed.add("HEAD")
        raise MethodNotAllowed(frozenset(allowed))

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> tuple[_TrieNode, dict[str, str]] | None:
        """Recursively match path parts against the trie."""
        if index == len(parts):
            if node.routes_by_method:
                return node, params
            return None

        part = parts[index]

        # 1. Static child
        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, params)
            if result is not None:
                return result

        # 2. Parameter child
        if node.param_child is not None:
            edge = node.param_child
            if edge.regex.match(part):
                new_params = {**params, edge.param_name: part}
                result = self._match_node(edge.node, parts, index + 1, new_params)
                if result is not None:
                    return result

        # 3. Catch-all
        if node.catch_all is not None:
            remaining = "/".join(parts[index:])
            if remaining and node.catch_all.node.routes_by_method:
                return node.catch_all.node, {**params, node.catch_all.param_name: remaining}

        return None

    async def __call__(self, request: Request) -> Response:
        """Dispatch *request* to the matching route's handler."""
        from snippetbox.server.errors import http_error_response

        try:
            match = self.match(request.method, request.path)
        except NotFound as exc:
            if self._not_found is not None:
                return await self._not_found(request)
            return http_error_response(exc, request)
        except HTTPError as exc:
            return http_error_response(exc, request)
        return await match.route.handler(request.with_path_params(match.path_params))
