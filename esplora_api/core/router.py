"""
Endpoint routing for the Esplora REST API.

Maps a logical operation and its parameters to an HTTP request. Nothing in
this module performs network I/O, both client flavours build their requests
here.
"""

import string
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple
from urllib.parse import quote, urlencode

from esplora_api.errors import InvalidParameter

Validator = Callable[[Any], str]
BodyDecoder = Callable[[bytes], Any]


@dataclass(frozen=True)
class Endpoint:
    """
    One logical Esplora operation.

    Attributes:
        name: Operation name, also the client method name
        method: HTTP verb
        path: Path template relative to the base URL, e.g. ``/tx/{txid}``
        decode: Turns a successful response body into the result value
        validators: Validator per parameter, returns the path-ready value
        optional_segments: Parameters appended as trailing path segments
            when given (``/blocks[/:start_height]``)
        query: Parameters sent in the query string when given
        body: Parameter sent as the request body
    """
    name: str
    method: str
    path: str
    decode: BodyDecoder
    validators: Mapping[str, Validator] = field(default_factory=dict)
    optional_segments: Tuple[str, ...] = ()
    query: Tuple[str, ...] = ()
    body: Optional[str] = None

    @property
    def path_parameters(self) -> Tuple[str, ...]:
        return tuple(
            name for _, name, _, _ in string.Formatter().parse(self.path) if name
        )

    @property
    def required_parameters(self) -> Tuple[str, ...]:
        required = self.path_parameters
        if self.body:
            required += (self.body,)
        return required

    @property
    def parameters(self) -> Tuple[str, ...]:
        return self.required_parameters + self.optional_segments + self.query


@dataclass(frozen=True)
class EsploraRequest:
    """A fully built request, ready for a transport."""
    endpoint: Endpoint
    method: str
    url: str
    body: Optional[str] = None

    @property
    def operation(self) -> str:
        return self.endpoint.name


ENDPOINTS: Dict[str, Endpoint] = {}


def register_endpoint(endpoint: Endpoint, replace: bool = False) -> Endpoint:
    """Add an operation to the routing table."""
    if endpoint.name in ENDPOINTS and not replace:
        raise ValueError(f"Endpoint already registered: {endpoint.name}")

    for name in endpoint.parameters:
        if name not in endpoint.validators:
            raise ValueError(f"{endpoint.name}: no validator for parameter {name!r}")

    ENDPOINTS[endpoint.name] = endpoint
    return endpoint


def get_endpoint(operation: str) -> Endpoint:
    try:
        return ENDPOINTS[operation]
    except KeyError:
        raise KeyError(f"Unknown Esplora operation: {operation}") from None


def _validate(endpoint: Endpoint, name: str, value: Any) -> str:
    try:
        return endpoint.validators[name](value)
    except ValueError as e:
        raise InvalidParameter(endpoint.name, name, value, str(e)) from None


def _segment(value: str) -> str:
    return quote(value, safe="")


def build_request(base_url: str, operation: str, **params: Any) -> EsploraRequest:
    """
    Build the request for an operation.

    Args:
        base_url: API root, trailing slashes are ignored
        operation: Name of a registered endpoint
        **params: Operation parameters, ``None`` leaves an optional one out

    Raises:
        KeyError: Unknown operation
        TypeError: Missing or unexpected parameters
        InvalidParameter: A parameter failed validation
    """
    endpoint = get_endpoint(operation)

    unexpected = set(params) - set(endpoint.parameters)
    if unexpected:
        raise TypeError(f"{operation}() got unexpected parameters: {', '.join(sorted(unexpected))}")

    missing = [name for name in endpoint.required_parameters if params.get(name) is None]
    if missing:
        raise TypeError(f"{operation}() missing required parameters: {', '.join(missing)}")

    # Validate everything before building anything
    values = {
        name: _validate(endpoint, name, value)
        for name, value in params.items()
        if value is not None
    }

    path = endpoint.path.format(
        **{name: _segment(values[name]) for name in endpoint.path_parameters}
    )
    for name in endpoint.optional_segments:
        if name in values:
            path += "/" + _segment(values[name])

    url = base_url.rstrip("/") + path

    query = [(name, values[name]) for name in endpoint.query if name in values]
    if query:
        url += "?" + urlencode(query)

    body = values[endpoint.body] if endpoint.body else None

    return EsploraRequest(endpoint=endpoint, method=endpoint.method, url=url, body=body)
