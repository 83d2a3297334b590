# SPDX-License-Identifier: Apache-2.0
"""Fixed scaffolding of a generated service.

Everything here is the same for every domain model apart from the names,
counts and settings substituted into the templates.
"""

from __future__ import annotations

from string import Template
from typing import List

from stormforge.config import GeneratorConfig
from stormforge.generators.api import route_path
from stormforge.generators.fields import doc_text, py_str
from stormforge.ir.types import IRModel
from stormforge.naming import to_field_name, to_kebab_case, to_pascal_case

PROJECT_VERSION = "0.1.0"

SUBPACKAGES = ("domain", "api", "infrastructure", "repository")


def package_name(model: IRModel, settings: GeneratorConfig) -> str:
    """Import package of the generated service."""
    return settings.package_name or to_field_name(model.bounded_context.name)


def distribution_name(model: IRModel) -> str:
    return to_kebab_case(model.bounded_context.name)


def _description(model: IRModel) -> str:
    context = model.bounded_context
    return " ".join((context.description or f"{context.name} bounded context service").split())


_MANIFEST = Template('''\
[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = $dist_name
version = "$version"
description = $description
readme = "README.md"
requires-python = $python_requires
dependencies = [
    # HTTP server and routing
    "fastapi>=0.110",
    "uvicorn[standard]>=0.27",
    # Serialization and validation
    "pydantic>=2.5",
    # Date and time handling
    "python-dateutil>=2.8",
    # Structured logging
    "structlog>=24.1",
    # OpenAPI documentation is served by fastapi
    # uuid and decimal come from the standard library
]

[project.optional-dependencies]
sql = ["sqlalchemy>=2.0"]
dev = ["pytest>=7.4", "httpx>=0.27"]

[tool.setuptools]
package-dir = {$package = "src"}
packages = [$packages]
''')


def render_manifest(model: IRModel, settings: GeneratorConfig) -> str:
    package = package_name(model, settings)
    packages = [package] + [f"{package}.{sub}" for sub in SUBPACKAGES]
    return _MANIFEST.substitute(
        dist_name=py_str(distribution_name(model)),
        version=PROJECT_VERSION,
        description=py_str(_description(model)),
        python_requires=py_str(settings.python_requires),
        package=py_str(package),
        packages=", ".join(py_str(p) for p in packages),
    )


_LIBRARY_ROOT = Template('''\
"""$summary

Generated by StormForge from the domain model.
"""

__version__ = "$version"
''')


def render_library_root(model: IRModel) -> str:
    return _LIBRARY_ROOT.substitute(summary=doc_text(_description(model)), version=PROJECT_VERSION)


_MAIN = Template('''\
"""HTTP service entry point for the $context bounded context.

Run with ``python -m $package.main`` or ``uvicorn $package.main:app``.
"""

from __future__ import annotations

import logging

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import create_router

SERVICE_PORT = $port
API_PREFIX = $api_prefix

logging.basicConfig(level=logging.INFO, format="%(message)s")

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)


def create_app() -> FastAPI:
    """Build the application with CORS, the domain routes and API docs."""
    app = FastAPI(
        title=$title,
        description=$description,
        version="$version",
        docs_url="/swagger-ui",
        openapi_url="/api-docs/openapi.json",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(create_router(), prefix=API_PREFIX)
    return app


app = create_app()


def main() -> None:
    logger.info("Starting service", context=$title, port=SERVICE_PORT)
    uvicorn.run(app, host="0.0.0.0", port=SERVICE_PORT)


if __name__ == "__main__":
    main()
''')


def render_main(model: IRModel, settings: GeneratorConfig) -> str:
    context = model.bounded_context.name
    return _MAIN.substitute(
        context=doc_text(context),
        package=package_name(model, settings),
        port=settings.service_port,
        api_prefix=py_str(settings.api_prefix),
        title=py_str(context),
        description=py_str(_description(model)),
        version=PROJECT_VERSION,
    )


def _init_module(docstring: str, import_line: str, names: List[str]) -> str:
    exported = ", ".join(py_str(name) for name in names)
    return f'"""{docstring}"""\n\n{import_line}\n\n__all__ = [{exported}]\n'


def render_domain_init(model: IRModel) -> str:
    return _init_module(
        f"Domain layer of the {doc_text(model.bounded_context.name)} bounded context.",
        "from . import commands, entities, events",
        ["commands", "entities", "events"],
    )


def render_api_init() -> str:
    return _init_module(
        "HTTP API layer.",
        "from .routes import ApiError, ApiResponse, create_router",
        ["ApiError", "ApiResponse", "create_router"],
    )


def render_infrastructure_init() -> str:
    return _init_module(
        "Infrastructure adapters.",
        "from .event_store import ConcurrencyError, EventStore, InMemoryEventStore",
        ["ConcurrencyError", "EventStore", "InMemoryEventStore"],
    )


REPOSITORY = '''\
"""Repository port and an in-memory adapter for aggregates."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """Loads and stores aggregates of one type by id."""

    @abstractmethod
    async def find_by_id(self, aggregate_id: str) -> Optional[T]:
        """Return the aggregate with ``aggregate_id``, or None."""
        ...

    @abstractmethod
    async def save(self, aggregate: T) -> None:
        """Insert or replace ``aggregate``."""
        ...

    @abstractmethod
    async def delete(self, aggregate_id: str) -> None:
        """Remove the aggregate with ``aggregate_id`` if present."""
        ...


class InMemoryRepository(Repository[T]):
    """Dict-backed repository for tests and local development."""

    def __init__(self, id_of: Callable[[T], str]):
        self._id_of = id_of
        self._items: Dict[str, T] = {}

    async def find_by_id(self, aggregate_id: str) -> Optional[T]:
        return self._items.get(aggregate_id)

    async def save(self, aggregate: T) -> None:
        self._items[self._id_of(aggregate)] = aggregate

    async def delete(self, aggregate_id: str) -> None:
        self._items.pop(aggregate_id, None)

    def all(self) -> List[T]:
        return list(self._items.values())

    def __len__(self) -> int:
        return len(self._items)
'''


EVENT_STORE = '''\
"""Append-only event store with optimistic concurrency per aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from ..domain.events import DomainEvent, EventMetadata


class ConcurrencyError(Exception):
    """The aggregate's stream moved on since it was loaded."""

    def __init__(self, aggregate_id: str, expected_version: int, actual_version: int):
        self.aggregate_id = aggregate_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Concurrency conflict on {aggregate_id}: "
            f"expected version {expected_version}, found {actual_version}"
        )


class EventStore(ABC):
    """Event streams keyed by aggregate id."""

    @abstractmethod
    async def append_events(
        self,
        aggregate_id: str,
        aggregate_type: str,
        events: Sequence[DomainEvent],
        expected_version: Optional[int] = None,
    ) -> int:
        """Append ``events`` to the aggregate's stream.

        Args:
            aggregate_id: Stream to append to
            aggregate_type: Aggregate type recorded in the event metadata
            events: Events in the order they happened
            expected_version: Stream length the caller last saw; None skips the check

        Returns:
            The new stream version

        Raises:
            ConcurrencyError: If ``expected_version`` does not match the stream
        """
        ...

    @abstractmethod
    async def load_events(self, aggregate_id: str) -> List[DomainEvent]:
        """Events of one aggregate in append order."""
        ...

    @abstractmethod
    async def get_all_events(self) -> List[DomainEvent]:
        """Every stored event in global append order."""
        ...


class InMemoryEventStore(EventStore):
    """List-backed event store. No persistence across restarts."""

    def __init__(self) -> None:
        self._streams: Dict[str, List[DomainEvent]] = {}
        self._log: List[DomainEvent] = []
        self._metadata: List[EventMetadata] = []

    async def append_events(
        self,
        aggregate_id: str,
        aggregate_type: str,
        events: Sequence[DomainEvent],
        expected_version: Optional[int] = None,
    ) -> int:
        stream = self._streams.setdefault(aggregate_id, [])
        if expected_version is not None and expected_version != len(stream):
            raise ConcurrencyError(aggregate_id, expected_version, len(stream))

        stored_at = datetime.now(timezone.utc)
        for event in events:
            stream.append(event)
            self._log.append(event)
            self._metadata.append(
                EventMetadata(
                    event_id=event.event_id,
                    event_type=event.type,
                    aggregate_id=aggregate_id,
                    aggregate_type=aggregate_type,
                    sequence_number=len(stream),
                    occurred_at=event.occurred_at,
                    stored_at=stored_at,
                )
            )
        return len(stream)

    async def load_events(self, aggregate_id: str) -> List[DomainEvent]:
        return list(self._streams.get(aggregate_id, []))

    async def get_all_events(self) -> List[DomainEvent]:
        return list(self._log)

    def metadata(self) -> List[EventMetadata]:
        return list(self._metadata)
'''


_README = Template('''\
# $title

$description

Generated by StormForge from the `$context` domain model (IR version $version).

## Getting started

```bash
pip install -e ".[dev]"
python -m $package.main
```

The service listens on port $port.

## API documentation

- Swagger UI: http://localhost:$port/swagger-ui
- OpenAPI document: http://localhost:$port/api-docs/openapi.json

## Endpoints

$endpoints

## Project layout

```
pyproject.toml
src/                      # the `$package` package
  main.py                 # FastAPI application and entry point
  domain/
    entities.py           # aggregates and value objects
    commands.py           # commands, CommandError, CommandHandler
    events.py             # events, DomainEvent envelope, EventMetadata
  api/
    routes.py             # one POST route per command, one GET route per query
  infrastructure/
    event_store.py        # EventStore and InMemoryEventStore
  repository/             # Repository and InMemoryRepository
tests/
```

## Architecture

- Commands are validated at the HTTP boundary and executed by a
  `CommandHandler` implementation, which returns the events they produce.
- Events are appended to the `EventStore` with an optimistic version check
  per aggregate.
- Aggregates are loaded and saved through a `Repository`.
- Route handlers, command handlers and aggregate invariants are stubs to be
  filled in.

## External event subscriptions

$subscriptions
''')


def _endpoints(model: IRModel, settings: GeneratorConfig) -> List[str]:
    lines = []
    for name, _ in model.sorted_commands():
        lines.append(f"- `POST {settings.api_prefix}{route_path(name)}`: {to_pascal_case(name)}")
    for name, _ in model.sorted_queries():
        lines.append(f"- `GET {settings.api_prefix}{route_path(name)}`: {to_pascal_case(name)}")
    return lines or ["None declared."]


def _subscriptions(model: IRModel) -> List[str]:
    lines = []
    for sub in model.external_events:
        line = f"- `{sub.context}.{sub.event}` handled by `{sub.handler}`"
        if sub.description:
            line += f": {' '.join(sub.description.split())}"
        lines.append(line)
    return lines or ["None declared."]


def render_readme(model: IRModel, settings: GeneratorConfig) -> str:
    context = model.bounded_context
    return _README.substitute(
        title=context.name,
        description=_description(model),
        context=context.name,
        version=model.version,
        package=package_name(model, settings),
        port=settings.service_port,
        endpoints="\n".join(_endpoints(model, settings)),
        subscriptions="\n".join(_subscriptions(model)),
    )
