"""
Pydantic Models and Schemas
===========================

Data models for story documents and loader results.
Rendering works on plain mappings; these models describe the same shape for
callers that want validation up front.
"""

from typing import Optional, List, Dict, Any
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


# Enums
class ElementType(str, Enum):
    """Story element types."""
    HEADING = "heading"
    HEADING1 = "heading1"
    HEADING2 = "heading2"
    HEADING3 = "heading3"
    HEADING4 = "heading4"
    HEADING5 = "heading5"
    HEADING6 = "heading6"
    PARAGRAPH = "paragraph"
    CONTAINER = "container"
    IMAGE = "image"
    VIDEO = "video"


class LayerTemplate(str, Enum):
    """amp-story-grid-layer templates."""
    FILL = "fill"
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"
    THIRDS = "thirds"


TEXT_ELEMENT_TYPES = frozenset(
    {
        ElementType.HEADING,
        ElementType.HEADING1,
        ElementType.HEADING2,
        ElementType.HEADING3,
        ElementType.HEADING4,
        ElementType.HEADING5,
        ElementType.HEADING6,
        ElementType.PARAGRAPH,
    }
)


# Story Models
class VideoSource(BaseModel):
    """One <source> of a video element."""
    source: str = Field(..., description="Video URL")
    type: str = Field(..., description="Format suffix, e.g. 'mp4'")


class StoryElement(BaseModel):
    """Story element. Any extra properties are kept and rendered as attributes."""
    type: ElementType = Field(..., description="Element type")
    text: Optional[str] = Field(None, description="Text content of text elements")
    elements: Optional[List["StoryElement"]] = Field(None, description="Container children")
    sources: Optional[List[VideoSource]] = Field(None, description="Video sources")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @model_validator(mode="after")
    def validate_type_fields(self) -> "StoryElement":
        """Check the fields each element type depends on."""
        if self.type in TEXT_ELEMENT_TYPES and self.text is None:
            raise ValueError(f"Element type '{self.type.value}' requires 'text'")
        if self.type == ElementType.CONTAINER and self.elements is None:
            raise ValueError("Element type 'container' requires 'elements'")
        if self.type == ElementType.VIDEO and self.sources is None:
            raise ValueError("Element type 'video' requires 'sources'")
        if self.elements is not None and self.type != ElementType.CONTAINER:
            raise ValueError(f"Element type '{self.type.value}' cannot have child elements")
        return self


# Update forward reference
StoryElement.model_rebuild()


class Layer(BaseModel):
    """Grid layer of a page."""
    template: LayerTemplate = Field(..., description="Layer template")
    element: Optional[StoryElement] = Field(None, description="Single element of a fill layer")
    elements: Optional[List[StoryElement]] = Field(None, description="Elements of other layers")

    @model_validator(mode="after")
    def validate_template_fields(self) -> "Layer":
        """Fill layers hold one element, every other template a list."""
        if self.template == LayerTemplate.FILL:
            if self.element is None:
                raise ValueError("Layer template 'fill' requires 'element'")
        elif self.elements is None:
            raise ValueError(f"Layer template '{self.template.value}' requires 'elements'")
        return self


class Page(BaseModel):
    """One story page."""
    id: str = Field(..., min_length=1, description="Page identifier")
    layers: List[Layer] = Field(default_factory=list, description="Layers, bottom first")


class Story(BaseModel):
    """Complete story document."""
    title: str = Field(..., description="Document title")
    canonical_url: str = Field(..., alias="canonicalUrl", description="Canonical URL")
    default_styles: Dict[str, Any] = Field(
        default_factory=dict, alias="defaultStyles", description="Stylesheet mapping"
    )
    pages: List[Page] = Field(default_factory=list, description="Pages in display order")

    model_config = ConfigDict(populate_by_name=True)

    def to_render_input(self) -> Dict[str, Any]:
        """Plain mapping in the shape the renderer consumes."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# Results
class RenderedFragment(BaseModel):
    """Rendered <amp-story> markup plus the element kinds that need extension scripts."""
    html: str
    required_scripts: List[str] = Field(default_factory=list)


class ParseResult(BaseModel):
    """Result of loading a story from JSON or YAML."""
    success: bool
    story: Optional[Story] = None
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    processing_time: float = 0.0
