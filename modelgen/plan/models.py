"""Data models for code plans."""

from dataclasses import dataclass

from ..identity import Identifier


@dataclass(frozen=True)
class GenerationTarget:
    """One planned output file."""

    path: str  # Relative POSIX path under the destination root
    body: str
    region_keys: tuple[str, ...] = ()
    entity: Identifier | None = None  # None for model-level files
    comment: str = "#"


@dataclass
class FieldSpec:
    """A field of a generated data structure."""

    name: str
    type: str
    optional: bool = False
    description: str | None = None
    validator: str | None = None  # Region key of the validation hook


@dataclass
class AccessorSpec:
    """A navigation method across one relationship end."""

    name: str
    relationship: str
    relationship_const: str
    role: str
    target: str
    target_module: str
    many: bool
    conditional: bool
    region: str

    @property
    def return_type(self) -> str:
        if self.many:
            return f"list[{self.target}]"
        return f"{self.target} | None"

    @property
    def role_text(self) -> str:
        return self.role.replace("_", " ")
