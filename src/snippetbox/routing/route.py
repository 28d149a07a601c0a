"""Route and RouteMatch frozen dataclasses."""

from dataclasses import dataclass

from snippetbox.middleware.protocol import Handler


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:    ``/snippet``         (is_param=False)
    Param:     ``/{id}``            (is_param=True, param_name="id")
    Catch-all: ``/{filepath:path}`` (is_param=True, param_type="path")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    ``handler`` is already wrapped in its chain; the router only calls it.
    """

    path: str
    handler: Handler
    methods: frozenset[str]
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
