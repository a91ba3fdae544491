"""Visual tree nodes produced by the renderer."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RenderNode:
    """One element of the live preview.

    ``kind`` names the widget (heading, paragraph, text_input, button,
    output_panel, loader, text, image, error, column); ``props`` carries its
    display data.
    """

    kind: str
    id: str | None = None
    props: dict[str, Any] = field(default_factory=dict)
    children: tuple["RenderNode", ...] = ()

    def find(self, node_id: str) -> "RenderNode | None":
        """Depth-first lookup by id."""
        if self.id == node_id:
            return self
        for child in self.children:
            found = child.find(node_id)
            if found is not None:
                return found
        return None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind, "props": dict(self.props)}
        if self.id is not None:
            data["id"] = self.id
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data
