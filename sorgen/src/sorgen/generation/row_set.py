"""Per-entity row storage with a hash-set key index."""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set
import pandas as pd
from sorgen.errors import GenerationError


@dataclass
class Row:
    """One record of an entity: attribute name to string value."""

    entity_id: str
    index: int
    values: Dict[str, str] = field(default_factory=dict)


class RowSet:
    """
    Ordered rows of a single entity plus the set of key values already used.

    Rows are only ever appended. ``used_keys`` is maintained incrementally so
    duplicate detection on insert is a set lookup, not a scan of prior rows.
    """

    def __init__(
        self,
        entity_id: str,
        headers: List[str],
        key_attribute: Optional[str],
        source: str = "",
    ):
        self.entity_id = entity_id
        self.headers = list(headers)
        self.key_attribute = key_attribute
        self.source = source
        self.rows: List[Row] = []
        self.used_keys: Set[str] = set()

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def add_row(self, values: Dict[str, str], strict: bool = True) -> Row:
        """
        Append a row, registering its key value.

        Args:
            values: Attribute values (missing headers are stored as empty strings later)
            strict: Raise on an empty or duplicate key. Rows read back from
                external CSVs are loaded with ``strict=False`` so that the
                validator can report the duplicates itself.

        Raises:
            GenerationError: On an empty or duplicate key when ``strict``
        """
        if self.key_attribute is not None:
            key = values.get(self.key_attribute, "")
            if strict:
                if not key:
                    raise GenerationError(
                        f"empty key for {self.entity_id}.{self.key_attribute} at row {len(self.rows)}"
                    )
                if key in self.used_keys:
                    raise GenerationError(
                        f"duplicate key '{key}' for {self.entity_id}.{self.key_attribute} at row {len(self.rows)}"
                    )
            if key:
                self.used_keys.add(key)
        row = Row(self.entity_id, len(self.rows), dict(values))
        self.rows.append(row)
        return row

    def has_key(self, value: str) -> bool:
        return value in self.used_keys

    def set_value(self, index: int, attribute: str, value: str) -> None:
        """Fill a non-key attribute of an existing row."""
        if attribute == self.key_attribute:
            raise GenerationError(
                f"key attribute {self.entity_id}.{attribute} cannot be changed after insertion"
            )
        self.rows[index].values[attribute] = value

    def column(self, attribute: str) -> List[str]:
        return [row.values.get(attribute, "") for row in self.rows]

    def key_values(self) -> List[str]:
        """Key values in row order."""
        if self.key_attribute is None:
            return []
        return self.column(self.key_attribute)

    def reset(self) -> None:
        self.rows.clear()
        self.used_keys.clear()

    def to_frame(self) -> pd.DataFrame:
        """Rows as a string DataFrame with columns in header order."""
        data = {h: self.column(h) for h in self.headers}
        return pd.DataFrame(data, columns=self.headers, dtype=str)

    @classmethod
    def from_frame(
        cls,
        entity_id: str,
        df: pd.DataFrame,
        key_attribute: Optional[str],
        source: str = "",
    ) -> "RowSet":
        """Rebuild a RowSet from CSV data without enforcing key uniqueness."""
        row_set = cls(entity_id, list(df.columns), key_attribute, source=source)
        for record in df.to_dict(orient="records"):
            row_set.add_row({k: "" if v is None else str(v) for k, v in record.items()}, strict=False)
        return row_set
