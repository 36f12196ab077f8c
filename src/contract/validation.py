"""Validation helpers for written event streams."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from contract.artifacts import EVENT_SCHEMA_VERSION

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True)
class ValidationMessage:
    path: Path
    message: str
    line: int | None = None

    def location(self) -> str:
        if self.line is None:
            return str(self.path)
        return f"{self.path}:{self.line}"

    def to_dict(self) -> dict[str, object]:
        return {
            "path": str(self.path),
            "line": self.line,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    errors: list[ValidationMessage] = field(default_factory=list)
    warnings: list[ValidationMessage] = field(default_factory=list)
    event_count: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_event_stream(
    path: Path, *, strict_schema_version: bool = False
) -> ValidationResult:
    """Check that every line is a valid event and every reference resolves.

    References may point at sets announced later in the stream.
    """
    from events.models import BuildEvent

    result = ValidationResult()

    if not path.exists():
        result.errors.append(
            ValidationMessage(path=path, message="Event stream does not exist.")
        )
        return result

    try:
        handle = path.open("rb")
    except OSError as exc:
        result.errors.append(
            ValidationMessage(path=path, message=f"Failed to read file: {exc}.")
        )
        return result

    announced: dict[str, int] = {}
    references: list[tuple[int, str]] = []
    missing_schema_emitted = False
    with handle:
        for line_number, raw_line in enumerate(handle, 1):
            line = raw_line.strip()
            if not line:
                continue
            try:
                data = orjson.loads(line)
            except orjson.JSONDecodeError as exc:
                result.errors.append(
                    ValidationMessage(
                        path=path, line=line_number, message=f"Invalid JSON: {exc}."
                    )
                )
                continue

            schema_present = isinstance(data, dict) and "schema_version" in data
            try:
                event = BuildEvent.model_validate(data)
            except ValidationError as exc:
                result.errors.append(
                    ValidationMessage(
                        path=path,
                        line=line_number,
                        message=f"Schema validation failed: {exc}.",
                    )
                )
                continue

            result.event_count += 1
            if not schema_present and not missing_schema_emitted:
                _report_missing_schema(
                    path, line_number, result, strict=strict_schema_version
                )
                missing_schema_emitted = True
            elif schema_present and event.schema_version != EVENT_SCHEMA_VERSION:
                result.errors.append(
                    ValidationMessage(
                        path=path,
                        line=line_number,
                        message=(
                            "Schema version mismatch: "
                            f"expected {EVENT_SCHEMA_VERSION}, "
                            f"got {event.schema_version}."
                        ),
                    )
                )

            set_id = event.id.named_set.id
            if set_id in announced:
                result.errors.append(
                    ValidationMessage(
                        path=path,
                        line=line_number,
                        message=(
                            f"Duplicate named set {set_id!r} "
                            f"(first announced on line {announced[set_id]})."
                        ),
                    )
                )
            else:
                announced[set_id] = line_number
            if event.named_set_of_files.name != set_id:
                result.errors.append(
                    ValidationMessage(
                        path=path,
                        line=line_number,
                        message=(
                            f"Named set payload {event.named_set_of_files.name!r} "
                            f"does not match event id {set_id!r}."
                        ),
                    )
                )
            references.extend(
                (line_number, ref.id) for ref in event.named_set_of_files.file_set_refs
            )

    for line_number, ref in references:
        if ref not in announced:
            result.errors.append(
                ValidationMessage(
                    path=path,
                    line=line_number,
                    message=f"Reference to unknown named set {ref!r}.",
                )
            )

    return result


def _report_missing_schema(
    path: Path, line: int, result: ValidationResult, *, strict: bool
) -> None:
    message = ValidationMessage(
        path=path,
        line=line,
        message=f"Missing schema_version; defaulted to {EVENT_SCHEMA_VERSION}.",
    )
    if strict:
        result.errors.append(message)
    else:
        result.warnings.append(message)


__all__ = [
    "ValidationMessage",
    "ValidationResult",
    "validate_event_stream",
]
