"""Code plan builder: model graph to generation targets."""

from .builder import GENERATED_HEADER, build_plan, create_environment, plan_entity
from .models import GenerationTarget
from .rules import RULES, class_name, module_name

__all__ = [
    "GENERATED_HEADER",
    "build_plan",
    "create_environment",
    "plan_entity",
    "GenerationTarget",
    "RULES",
    "class_name",
    "module_name",
]
