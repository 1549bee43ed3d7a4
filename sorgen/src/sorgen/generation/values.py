"""Faker-based synthetic values for non-relationship attributes."""

from enum import Enum
from typing import Optional
import numpy as np
from faker import Faker
from sorgen.ir.schema import Attribute, BOOLEAN_TYPES, DATETIME_TYPES
from sorgen.generation.constants import (
    DATE_RANGE_DAYS,
    DEFAULT_INT_RANGE,
    DEFAULT_PERCENT_RANGE,
    DEFAULT_PRICE_RANGE,
    DEPARTMENTS,
    LIST_DELIMITER,
    LIST_MAX_VALUES,
    LIST_MIN_VALUES,
    STATUS_VALUES,
)

_INTEGER_TYPES = {"int", "int32", "int64", "integer", "long"}
_DECIMAL_TYPES = {"double", "float", "decimal", "number"}


class FieldType(str, Enum):
    """Kind of value a column holds, inferred from its header."""

    NAME = "name"
    DESCRIPTION = "description"
    BOOLEAN = "boolean"
    DATE = "date"
    STATUS = "status"
    GENERIC = "generic"


def detect_field_type(header: str) -> FieldType:
    """Infer the field type of a column from its header name."""
    h = header.lower()

    if h.endswith("name"):
        return FieldType.NAME
    if (
        h.endswith("description")
        or "desc" in h
        or "comment" in h
        or "summary" in h
        or "notes" in h
    ):
        return FieldType.DESCRIPTION
    for word in ("valid", "enabled", "active", "archived"):
        if h.endswith(word):
            return FieldType.BOOLEAN
    if "date" in h or "time" in h or "created" in h or "updated" in h:
        return FieldType.DATE
    if h.endswith("status"):
        return FieldType.STATUS
    return FieldType.GENERIC


def sanitize(value: str) -> str:
    """Replace characters that complicate CSV quoting."""
    return value.replace("\n", ", ").replace(",", "-").replace('"', "'")


class ValueSynthesizer:
    """
    Produces string values for ordinary attributes.

    Both Faker and the numpy generator are seeded from the run seed so the
    same seed yields the same values.
    """

    def __init__(self, seed: Optional[int] = None, locale: str = "en_US"):
        self.fk = Faker(locale)
        if seed is not None:
            self.fk.seed_instance(seed)
        self.rng = np.random.default_rng(seed)

    def value_for(self, attribute: Attribute, entity_name: str, row_index: int) -> str:
        """A value for ``attribute`` at ``row_index``; list attributes get 1-3 joined values."""
        if not attribute.list:
            return self.scalar_value(attribute, entity_name, row_index)
        n = int(self.rng.integers(LIST_MIN_VALUES, LIST_MAX_VALUES + 1))
        return LIST_DELIMITER.join(
            self.scalar_value(attribute, entity_name, row_index) for _ in range(n)
        )

    def scalar_value(self, attribute: Attribute, entity_name: str, row_index: int) -> str:
        declared = self._declared_type_value(attribute, row_index)
        if declared is not None:
            return declared

        field_type = detect_field_type(attribute.name)
        if field_type == FieldType.NAME:
            return self.name_value(entity_name, row_index)
        if field_type == FieldType.DESCRIPTION:
            return self.fk.sentence(nb_words=int(self.rng.integers(3, 9)))
        if field_type == FieldType.BOOLEAN:
            return self.boolean_value(row_index)
        if field_type == FieldType.DATE:
            return self.date_value()
        if field_type == FieldType.STATUS:
            return STATUS_VALUES[row_index % len(STATUS_VALUES)]
        return sanitize(self.generic_value(attribute.name, row_index))

    def _declared_type_value(self, attribute: Attribute, row_index: int) -> Optional[str]:
        declared = attribute.type.lower()
        if declared in _INTEGER_TYPES:
            return str(int(self.rng.integers(DEFAULT_INT_RANGE[0], DEFAULT_INT_RANGE[1] + 1)))
        if declared in _DECIMAL_TYPES:
            return f"{self.rng.uniform(*DEFAULT_PRICE_RANGE):.2f}"
        if declared in BOOLEAN_TYPES:
            return self.boolean_value(row_index)
        if declared in DATETIME_TYPES:
            return self.date_value()
        return None

    @staticmethod
    def boolean_value(row_index: int) -> str:
        return "true" if row_index % 2 == 0 else "false"

    def date_value(self) -> str:
        return self.fk.date_between(start_date=f"-{DATE_RANGE_DAYS}d", end_date="today").isoformat()

    def name_value(self, entity_name: str, row_index: int) -> str:
        """A name that fits the kind of entity (people, roles, teams, products)."""
        e = entity_name.lower()
        if any(w in e for w in ("user", "person", "employee", "customer")):
            value = self.fk.name()
        elif "role" in e or "job" in e:
            value = self.fk.job()
        elif any(w in e for w in ("group", "team", "department")):
            value = DEPARTMENTS[row_index % len(DEPARTMENTS)]
        elif "product" in e or "item" in e:
            value = f"{self.fk.color_name()} {self.fk.word().title()}"
        else:
            value = self.fk.company()
        return sanitize(value)

    def generic_value(self, header: str, row_index: int) -> str:
        h = header.lower()

        if any(w in h for w in ("count", "number", "amount", "quantity")):
            if "price" in h or "cost" in h:
                return f"{self.rng.uniform(*DEFAULT_PRICE_RANGE):.2f}"
            return str(int(self.rng.integers(DEFAULT_INT_RANGE[0], DEFAULT_INT_RANGE[1] + 1)))
        if "percent" in h or "rate" in h:
            return f"{int(self.rng.integers(DEFAULT_PERCENT_RANGE[0], DEFAULT_PERCENT_RANGE[1] + 1))}%"
        if "email" in h:
            return self.fk.email()
        if "phone" in h:
            return self.fk.phone_number()
        if "url" in h or "website" in h or "link" in h:
            return self.fk.url()
        if "address" in h:
            return self.fk.address()
        if "street" in h:
            return self.fk.street_address()
        if "city" in h:
            return self.fk.city()
        if "state" in h:
            return self.fk.state()
        if "zip" in h or "postal" in h:
            return self.fk.zipcode()
        if "country" in h:
            return self.fk.country()
        if "color" in h or "colour" in h:
            return self.fk.color_name()
        if "password" in h:
            return self.fk.password(length=12)
        if h == "ip" or "ipaddress" in h:
            return self.fk.ipv4()
        if "uuid" in h or "guid" in h:
            return self.fk.uuid4()
        if "code" in h:
            return f"{self.fk.lexify('???').upper()}-{1000 + row_index}"
        return f"{self.fk.word()}_{row_index}"
