"""Generate ER diagrams from SOR definitions using graphviz."""

import html
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple
import graphviz
from sorgen.errors import DataLoadError
from sorgen.ir.schema import SORDefinition
from sorgen.generation.graph import build_dependency_graph, orient_link
from sorgen.generation.error_logging import log_error_with_recovery
from sorgen.config.logging import get_logger

logger = get_logger(__name__)

HEADER_COLOR = "#4A90E2"
NODE_COLOR = "#E8F4F8"


@dataclass
class DiagramEntity:
    id: str
    external_id: str
    display_name: str
    attributes: List[str] = field(default_factory=list)  # names, key marked "(PK)"


@dataclass
class DiagramRelationship:
    name: str
    from_entity: str
    to_entity: str
    from_attribute: str
    to_attribute: str


def diagram_model(defn: SORDefinition) -> Tuple[List[DiagramEntity], List[DiagramRelationship]]:
    """
    Plain entity and relationship lists for rendering.

    Relationships whose endpoints do not resolve are skipped.
    """
    entities = []
    for entity_id in sorted(defn.entities):
        entity = defn.entities[entity_id]
        entities.append(
            DiagramEntity(
                id=entity_id,
                external_id=entity.external_id,
                display_name=entity.display_name or entity_id,
                attributes=[f"{a.name} (PK)" if a.unique_id else a.name for a in entity.attributes],
            )
        )

    result = build_dependency_graph(defn, prevent_cycles=False)
    for warning in result.warnings:
        logger.debug(f"Diagram: {warning}")

    relationships = []
    for link in result.links:
        parent, child = orient_link(link)
        relationships.append(
            DiagramRelationship(
                name=link.name,
                from_entity=child.entity_id,
                to_entity=parent.entity_id,
                from_attribute=child.attribute_name,
                to_attribute=parent.attribute_name,
            )
        )
    return entities, relationships


def _entity_label(entity: DiagramEntity) -> str:
    rows = [
        '<<TABLE BORDER="1" CELLBORDER="1" CELLSPACING="0" CELLPADDING="4">',
        f'<TR><TD BGCOLOR="{HEADER_COLOR}"><B><FONT COLOR="white">'
        f"{html.escape(entity.display_name)}</FONT></B></TD></TR>",
    ]
    for attr in entity.attributes:
        text = html.escape(attr)
        if attr.endswith("(PK)"):
            text = f"<B>{text}</B>"
        rows.append(f'<TR><TD ALIGN="LEFT">{text}</TD></TR>')
    rows.append("</TABLE>>")
    return "".join(rows)


def build_digraph(defn: SORDefinition) -> graphviz.Digraph:
    entities, relationships = diagram_model(defn)
    dot = graphviz.Digraph(comment=f"ER Diagram: {defn.display_name}")
    dot.attr(rankdir="LR")
    dot.attr("node", shape="plaintext")
    dot.attr("edge", arrowsize="0.8")

    for entity in entities:
        dot.node(entity.id, label=_entity_label(entity), fillcolor=NODE_COLOR, style="filled")
    for rel in relationships:
        dot.edge(
            rel.from_entity,
            rel.to_entity,
            label=f"{rel.from_attribute} -> {rel.to_attribute}",
            style="dashed",
            arrowhead="crow",
        )
    return dot


def render_er_diagram(defn: SORDefinition, out_path: Path) -> Path:
    """
    Write the diagram source to ``out_path`` (.dot) and an .svg when Graphviz is installed.

    Returns:
        Path of the rendered .svg, or of the .dot source when ``dot`` is not on PATH

    Raises:
        DataLoadError: If the source file cannot be written
    """
    out_path = Path(out_path).with_suffix(".dot")
    dot = build_digraph(defn)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        dot.save(filename=str(out_path))
    except OSError as e:
        raise DataLoadError(f"Failed to write ER diagram source {out_path}: {e}") from e

    if shutil.which("dot") is None:
        logger.info(f"Graphviz 'dot' not found on PATH; wrote diagram source only: {out_path}")
        return out_path

    svg_path = Path(dot.render(filename=str(out_path.with_suffix("")), format="svg", cleanup=True))
    logger.info(f"ER diagram saved to: {svg_path}")
    return svg_path


def try_render_er_diagram(defn: SORDefinition, out_path: Path) -> Optional[Path]:
    """Render the diagram, logging and returning None when Graphviz fails."""
    try:
        return render_er_diagram(defn, out_path)
    except (graphviz.ExecutableNotFound, graphviz.CalledProcessError) as e:
        log_error_with_recovery(
            error=e,
            recovery_action="Skipping ER diagram rendering; data output is unaffected",
            context={"out_path": str(out_path)},
            operation="rendering ER diagram",
        )
        return None
