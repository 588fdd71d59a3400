"""Action sources -- locations that define actions by name.

A command's ``sources`` list names directories or URLs holding action
definitions. Each location is classified once:

* an absolute ``http``/``https`` URL becomes an :class:`HttpSource`;
* anything else becomes a :class:`FileSource`.

Sources are collected in a :class:`SourceRegistry` which is created per
process and passed explicitly to the dispatcher and runtime. Adding the same
location twice is a no-op.

An action definition is a mapping in the same shape as a command's
``action`` field::

    {"name": "core.echo", "ctx": {"greeting": "hello"}}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Union
from urllib.parse import urlparse

import httpx
import yaml

from actionscli.exceptions import SourceError

logger = logging.getLogger(__name__)

_DEFINITION_SUFFIXES = (".json", ".yaml", ".yml")


def is_url(value: str) -> bool:
    """Return ``True`` if *value* is an absolute ``http`` or ``https`` URL."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


@dataclass(frozen=True)
class FileSource:
    """Action definitions stored as files under a directory.

    The action ``net.http.get`` is looked up as ``<path>/net/http/get.json``
    (or ``.yaml``/``.yml``).
    """

    path: str

    def find(self, name: str) -> Optional[dict[str, Any]]:
        base = Path(self.path).joinpath(*name.split("."))
        for suffix in _DEFINITION_SUFFIXES:
            candidate = base.with_name(base.name + suffix)
            if candidate.is_file():
                logger.debug("Action %s found at %s", name, candidate)
                return _read_definition(candidate)
        return None


@dataclass(frozen=True)
class HttpSource:
    """Action definitions served over HTTP at ``<url>/<name>``."""

    url: str
    timeout: float = 30.0

    def find(self, name: str) -> Optional[dict[str, Any]]:
        target = f"{self.url.rstrip('/')}/{name}"
        try:
            response = httpx.get(target, timeout=self.timeout, follow_redirects=True)
        except httpx.RequestError as exc:
            raise SourceError(f"Failed to fetch action {name} from {target}: {exc}") from exc

        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise SourceError(
                f"HTTP {response.status_code} fetching action {name} from {target}"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise SourceError(f"Action {name} at {target} is not valid JSON") from exc
        return _check_definition(data, target)


Source = Union[FileSource, HttpSource]


def make_source(location: str) -> Source:
    """Classify *location* as an HTTP or file source."""
    if is_url(location):
        return HttpSource(url=location)
    return FileSource(path=location)


class SourceRegistry:
    """Ordered, idempotent collection of action sources.

    Example::

        registry = SourceRegistry()
        registry.bind(["./actions", "https://example.com/actions"])
        definition = registry.find("core.greet")
    """

    def __init__(self, sources: Iterable[Source] = ()) -> None:
        self._sources: list[Source] = []
        for source in sources:
            self.add(source)

    def add(self, source: Source) -> bool:
        """Register *source*; returns ``False`` if it was already present."""
        if source in self._sources:
            return False
        self._sources.append(source)
        logger.debug("Registered action source %r", source)
        return True

    def bind(self, locations: Iterable[str]) -> None:
        """Classify and register every location string."""
        for location in locations:
            self.add(make_source(location))

    def find(self, name: str) -> Optional[dict[str, Any]]:
        """Return the first definition of action *name*, searching in order."""
        for source in self._sources:
            definition = source.find(name)
            if definition is not None:
                return definition
        return None

    def __iter__(self) -> Iterator[Source]:
        return iter(list(self._sources))

    def __len__(self) -> int:
        return len(self._sources)


def _read_definition(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SourceError(f"Failed to read action definition {path}: {exc}") from exc
    try:
        if path.suffix == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise SourceError(f"Invalid action definition {path}: {exc}") from exc
    return _check_definition(data, str(path))


def _check_definition(data: Any, origin: str) -> dict[str, Any]:
    if not isinstance(data, dict) or not isinstance(data.get("name"), str):
        raise SourceError(f"Action definition at {origin} must be a mapping with a 'name'")
    return data
