"""Code plan builder: turns a model graph into ordered generation targets."""

import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..errors import PlanError
from ..graph.model_graph import Entity, ModelGraph
from ..logs import get_logger
from ..regions.errors import RegionError
from ..regions.extractor import scan_regions
from ..regions.markers import begin_marker, end_marker
from ..schema.profile import TargetProfile
from .models import GenerationTarget
from .rules import RULES, module_context, module_name

logger = get_logger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

# First line of every generated file; also used to recognise stale files
GENERATED_HEADER = "Generated by modelgen"

COMMENT_LEADERS = {"python": "#"}


def is_stub(text: str, comment: str = "#") -> bool:
    """Check whether region text is still the placeholder a template wrote."""
    lines = text.splitlines()
    return (
        len(lines) == 1
        and re.fullmatch(rf"[ \t]*{re.escape(comment)} Add .+ here\.", lines[0]) is not None
    )


def create_environment(comment: str = "#") -> Environment:
    """Create the jinja2 environment used to render targets.

    Args:
        comment: Line-comment leader of the target language.

    Returns:
        A configured Environment with the ``region`` helper installed.
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )

    def region(key: str, stub: str, indent: int = 0) -> str:
        pad = " " * indent
        return "\n".join(
            [
                pad + begin_marker(key, comment),
                f"{pad}{comment} {stub}",
                pad + end_marker(key, comment),
            ]
        )

    env.globals["region"] = region
    env.globals["comment"] = comment
    return env


def target_path(entity: Entity, profile: TargetProfile) -> str:
    """Relative destination path for an entity's file."""
    return f"{module_name(entity)}.{profile.extension}"


def header_line(graph: ModelGraph) -> str:
    return (
        f"{GENERATED_HEADER} from namespace '{graph.namespace}'. "
        "Only code inside protected regions survives regeneration."
    )


def plan_entity(
    entity: Entity,
    graph: ModelGraph,
    profile: TargetProfile,
    env: Environment,
) -> GenerationTarget:
    """Apply the rule for one entity and render its target.

    Args:
        entity: An entity whose kind owns a file.
        graph: The model graph.
        profile: The target profile.
        env: The rendering environment.

    Returns:
        The generation target for the entity.

    Raises:
        PlanError: If the rendered body has invalid region markers.
    """
    template_name, rule = RULES[entity.kind]
    context = rule(entity, graph, profile)
    body = env.get_template(template_name).render(
        header=header_line(graph),
        shapes=profile.shapes,
        emit_new=profile.emit_new,
        doc_tests=profile.doc_tests,
        **context,
    )
    return _target(target_path(entity, profile), body, entity, env)


def _target(
    path: str, body: str, entity: Entity | None, env: Environment
) -> GenerationTarget:
    try:
        keys = tuple(region.key for region in scan_regions(body, path))
    except RegionError as e:
        raise PlanError(f"Rendered body has invalid regions: {e}", path) from e
    return GenerationTarget(
        path=path,
        body=body,
        region_keys=keys,
        entity=entity.id if entity is not None else None,
        comment=env.globals["comment"],
    )


def build_plan(
    graph: ModelGraph, profile: TargetProfile | None = None
) -> list[GenerationTarget]:
    """Build the ordered code plan for a model.

    Targets follow entity declaration order. With ``profile.parallel`` the
    entities are rendered on a thread pool and reassembled by declaration
    index, so the output is identical to a sequential run.

    Args:
        graph: The model graph.
        profile: The target profile (defaults to ``TargetProfile()``).

    Returns:
        The generation targets.

    Raises:
        PlanError: If two targets share a path or a rule fails.
    """
    profile = profile or TargetProfile()
    env = create_environment(COMMENT_LEADERS[profile.language])
    entities = [e for e in graph.entities if e.kind in RULES]

    if profile.parallel and len(entities) > 1:
        rendered: dict[int, GenerationTarget] = {}
        with ThreadPoolExecutor(max_workers=profile.max_workers) as pool:
            futures = {
                pool.submit(plan_entity, entity, graph, profile, env): entity.index
                for entity in entities
            }
            for future in as_completed(futures):
                rendered[futures[future]] = future.result()
        targets = [rendered[entity.index] for entity in entities]
    else:
        targets = [plan_entity(entity, graph, profile, env) for entity in entities]

    if profile.emit_module:
        body = env.get_template("module.py.j2").render(
            header=header_line(graph), **module_context(graph, profile)
        )
        targets.append(_target(f"__init__.{profile.extension}", body, None, env))

    seen: dict[str, GenerationTarget] = {}
    for target in targets:
        if target.path in seen:
            raise PlanError(f"Two targets write to '{target.path}'", target.path)
        seen[target.path] = target

    logger.debug("Planned %d target(s) for namespace '%s'", len(targets), graph.namespace)
    return targets
