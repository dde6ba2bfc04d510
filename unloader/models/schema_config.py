"""Models for the compiled application schema artifact."""

from typing import Optional

from pydantic import BaseModel, Field


class ColumnSchema(BaseModel):
    """A declared column of a relation."""

    index: int = Field(description="Position of the column in the relation declaration")
    type: Optional[str] = Field(default=None, description="Declared column type")


class RelationSchema(BaseModel):
    """A relation as declared in the compiled schema."""

    variable_type: Optional[str] = Field(
        default=None,
        description="Inference variable type; set only for random-variable relations",
    )
    columns: dict[str, ColumnSchema] = Field(default_factory=dict)

    @property
    def is_variable(self) -> bool:
        return self.variable_type is not None

    def ordered_columns(self) -> list[str]:
        """Return the user columns sorted by their declared index."""
        return [
            name
            for name, _ in sorted(self.columns.items(), key=lambda item: item[1].index)
        ]


class SchemaConfig(BaseModel):
    """Schema section of the compiled artifact."""

    relations: dict[str, RelationSchema] = Field(default_factory=dict)


class CompiledConfig(BaseModel):
    """Top-level structure of ``run/compiled/schema.json``."""

    schema_: SchemaConfig = Field(default_factory=SchemaConfig, alias="schema")

    model_config = {"populate_by_name": True}
