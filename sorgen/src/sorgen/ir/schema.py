"""SOR definition model: entities, attributes and relationships."""

from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

NUMERIC_TYPES = {"int", "int32", "int64", "integer", "long", "double", "float", "decimal", "number"}
BOOLEAN_TYPES = {"bool", "boolean"}
DATETIME_TYPES = {"datetime", "date", "timestamp"}


class _SORModel(BaseModel):
    """Base model: camelCase aliases in YAML, snake_case in Python."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Attribute(_SORModel):
    """A typed column of an entity."""

    name: str
    external_id: str = Field(default="", alias="externalId")
    description: str = ""
    type: str = "String"
    indexed: bool = False
    unique_id: bool = Field(default=False, alias="uniqueId")
    attribute_alias: str = Field(default="", alias="attributeAlias")
    list: bool = False

    @property
    def is_numeric(self) -> bool:
        return self.type.lower() in NUMERIC_TYPES


class Entity(_SORModel):
    """An entity of the SOR; generated as one CSV file."""

    display_name: str = Field(default="", alias="displayName")
    external_id: str = Field(default="", alias="externalId")
    description: str = ""
    entity_alias: str = Field(default="", alias="entityAlias")
    attributes: List[Attribute] = Field(default_factory=list)

    @property
    def unique_attribute(self) -> Optional[Attribute]:
        """The first attribute flagged uniqueId, or None."""
        for attr in self.attributes:
            if attr.unique_id:
                return attr
        return None

    @property
    def file_name(self) -> str:
        """CSV file name: last path segment of the external id plus .csv."""
        if not self.external_id:
            return "unknown.csv"
        return self.external_id.split("/")[-1] + ".csv"

    @property
    def headers(self) -> List[str]:
        return [attr.name for attr in self.attributes]


class RelationshipPathStep(_SORModel):
    """One step of a path relationship."""

    relationship: str
    direction: str = ""


class Relationship(_SORModel):
    """Either a direct attribute-to-attribute link or a path over other relationships."""

    display_name: str = Field(default="", alias="displayName")
    name: str = ""
    from_attribute: str = Field(default="", alias="fromAttribute")
    to_attribute: str = Field(default="", alias="toAttribute")
    path: List[RelationshipPathStep] = Field(default_factory=list)

    @property
    def is_path(self) -> bool:
        return len(self.path) > 0


class SORDefinition(_SORModel):
    """Top-level SOR document."""

    display_name: str = Field(default="", alias="displayName")
    description: str = ""
    hostname: str = ""
    type: str = ""
    adapter_config: str = Field(default="", alias="adapterConfig")
    entities: Dict[str, Entity] = Field(default_factory=dict)
    relationships: Dict[str, Relationship] = Field(default_factory=dict)

    def entity_by_external_id(self, external_id: str) -> Optional[Entity]:
        for entity in self.entities.values():
            if entity.external_id == external_id:
                return entity
        return None
