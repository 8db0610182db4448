"""Target profile: the generation settings supplied by the caller."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .loader import load_yaml, parse_data

Shape = Literal["data_structure", "accessor_set", "store_adapter"]

ALL_SHAPES: tuple[str, ...] = ("data_structure", "accessor_set", "store_adapter")


class TargetProfile(BaseModel):
    """Settings that select the output language and shapes.

    ``emit_new`` and ``doc_tests`` control the constructor and its doctest
    example on generated data structures; ``emit_module`` adds a package
    module re-exporting every generated class.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    language: Literal["python"] = "python"
    extension: str = Field(default="py", pattern=r"^[A-Za-z0-9]+$")
    shapes: tuple[Shape, ...] = ALL_SHAPES
    emit_new: bool = True
    doc_tests: bool = False
    emit_module: bool = False
    strict: bool = True
    parallel: bool = False
    max_workers: int | None = Field(default=None, ge=1)

    @field_validator("shapes", mode="after")
    @classmethod
    def canonical_shapes(cls, shapes: tuple[str, ...]) -> tuple[str, ...]:
        """Drop duplicates and keep the canonical section order."""
        return tuple(shape for shape in ALL_SHAPES if shape in shapes)

    @model_validator(mode="after")
    def check_shapes(self) -> "TargetProfile":
        """Accessors and store adapters are built around the data structure."""
        if not self.has_shape("data_structure"):
            dependent = [s for s in self.shapes if s != "data_structure"]
            if dependent:
                raise ValueError(
                    f"shapes {dependent} require the data_structure shape"
                )
        return self

    def has_shape(self, shape: str) -> bool:
        """Check whether an output shape is enabled."""
        return shape in self.shapes


def load_profile(path: str | Path) -> TargetProfile:
    """Load a target profile from a YAML file.

    Raises:
        SchemaLoadError: If the file cannot be read or parsed.
        SchemaValidationError: If the profile fails validation.
    """
    return parse_data(load_yaml(path), TargetProfile)
