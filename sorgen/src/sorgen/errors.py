"""Exception hierarchy for sorgen."""

from typing import Any, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from sorgen.ir.validators import SchemaIssue


class SorgenError(Exception):
    """Base class for all sorgen errors."""


class SchemaError(SorgenError):
    """The SOR definition is structurally invalid and cannot be generated."""

    def __init__(self, issues: List["SchemaIssue"], message: Optional[str] = None):
        self.issues = list(issues)
        if message is None:
            lines = [f"Schema validation failed with {len(self.issues)} issue(s):"]
            lines.extend(f"  - [{i.code}] {i.location}: {i.message}" for i in self.issues)
            message = "\n".join(lines)
        super().__init__(message)


class CountConfigError(SorgenError):
    """Invalid row-count configuration."""

    def __init__(
        self,
        message: str,
        entity_id: Optional[str] = None,
        field: Optional[str] = None,
        value: Any = None,
        suggestion: Optional[str] = None,
    ):
        self.entity_id = entity_id
        self.field = field
        self.value = value
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.args[0] if self.args else "Count configuration error"]
        if self.entity_id:
            parts.append(f"entity: {self.entity_id}")
        if self.field:
            parts.append(f"field: {self.field}")
        if self.value is not None:
            parts.append(f"value: {self.value}")
        msg = " | ".join(parts)
        if self.suggestion:
            msg += f"\nSuggestion: {self.suggestion}"
        return msg


class GenerationError(SorgenError):
    """Invalid generation input or a broken generation-time invariant."""


class DataLoadError(SorgenError):
    """Reading or writing schema/CSV files failed."""


class SequencingError(SorgenError):
    """The dependency graph cannot be ordered (it still contains a cycle)."""
