"""
Monitoring event model.

Events arrive as Sensu-style JSON. Only the entity and check blocks are
required; the handler reads a handful of their fields and never
modifies them.
"""

import sys
from pathlib import Path
from typing import Any, TextIO

from pydantic import BaseModel, Field, ValidationError

from rockethandler.errors import EventError


class ObjectMeta(BaseModel):
    """Name, namespace, labels and annotations of an entity or check."""
    name: str = ""
    namespace: str = "default"
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)


class Entity(BaseModel):
    """The monitored entity the event is about."""
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    entity_class: str = ""
    subscriptions: list[str] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return self.metadata.name


class Check(BaseModel):
    """The check result carried by the event."""
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    output: str = ""
    status: int = 0
    command: str = ""
    interval: int = 0
    occurrences: int = 0
    state: str = ""
    issued: int = 0
    executed: int = 0

    @property
    def name(self) -> str:
        return self.metadata.name


class Event(BaseModel):
    """A monitoring event: one check result for one entity."""
    timestamp: int = 0
    id: str = ""
    entity: Entity
    check: Check

    def template_context(self) -> dict[str, Any]:
        """
        Build the names available to description templates.

        Exposes `Check` and `Entity` with capitalized keys, so a template
        reads `{{ Check.Output }}` or `{{ Entity.Name }}`. Only plain
        values are exposed, never the model itself.
        """
        check = self.check
        entity = self.entity
        return {
            "Check": {
                "Name": check.name,
                "Namespace": check.metadata.namespace,
                "Labels": check.metadata.labels,
                "Annotations": check.metadata.annotations,
                "Output": check.output,
                "Status": check.status,
                "Command": check.command,
                "Interval": check.interval,
                "Occurrences": check.occurrences,
                "State": check.state,
                "Issued": check.issued,
                "Executed": check.executed,
            },
            "Entity": {
                "Name": entity.name,
                "Namespace": entity.metadata.namespace,
                "Labels": entity.metadata.labels,
                "Annotations": entity.metadata.annotations,
                "EntityClass": entity.entity_class,
                "Subscriptions": entity.subscriptions,
            },
            "Timestamp": self.timestamp,
            "ID": self.id,
        }


def parse_event(raw: str) -> Event:
    """
    Validate an event from JSON text.

    Raises:
        EventError: If the text is not JSON or lacks entity/check
    """
    if not raw.strip():
        raise EventError("no event data received")
    try:
        return Event.model_validate_json(raw)
    except ValidationError as e:
        raise EventError(f"invalid event: {e}") from e


def load_event(source: str | Path | TextIO | None = None) -> Event:
    """
    Read an event from a file path, an open stream, or stdin.

    Args:
        source: Path to a JSON file, a readable stream, or None for stdin

    Returns:
        Validated Event
    """
    if source is None:
        source = sys.stdin

    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise EventError(f"event file not found: {source}")
        raw = path.read_text(encoding="utf-8")
    else:
        raw = source.read()

    return parse_event(raw)
