"""Validation report models."""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field

ViolationKind = Literal["missing_file", "uniqueness", "referential"]


class Violation(BaseModel):
    """One data-quality problem found by the validator."""

    kind: ViolationKind
    entity_id: str
    message: str
    relationship_id: Optional[str] = None
    value: Optional[str] = None
    rows: List[int] = Field(default_factory=list)

    def __str__(self) -> str:
        return self.message


class ValidationSummary(BaseModel):
    """Ordered violations with per-kind counts."""

    violations: List[Violation] = Field(default_factory=list)

    @property
    def messages(self) -> List[str]:
        return [v.message for v in self.violations]

    @property
    def relationship_issues(self) -> int:
        return sum(1 for v in self.violations if v.kind == "referential")

    @property
    def uniqueness_issues(self) -> int:
        return sum(1 for v in self.violations if v.kind == "uniqueness")

    @property
    def missing_files(self) -> int:
        return sum(1 for v in self.violations if v.kind == "missing_file")

    @property
    def passed(self) -> bool:
        return not self.violations


class ValidationResult(BaseModel):
    """Outcome of validating a directory of existing CSV files."""

    data_dir: str
    files_validated: int = 0
    records_validated: int = 0
    summary: ValidationSummary = Field(default_factory=ValidationSummary)
    diagram_path: Optional[str] = None

    @property
    def violations(self) -> List[str]:
        return self.summary.messages

    @property
    def passed(self) -> bool:
        return self.summary.passed
