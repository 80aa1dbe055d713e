"""
Story Renderer
==============

Recursive rendering of story pages into <amp-story> markup.

Elements are dispatched on their ``type`` and layers on their ``template``
through registries of render functions. Element kinds that need an AMP
extension script are collected in a RenderContext created for each call,
so a StoryRenderer can be shared between threads.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Sequence

from markupsafe import escape

from amp_story.config.logging import get_logger
from amp_story.core.rendering.components import COMPONENT_TO_HTML_TAG
from amp_story.core.rendering.tag import render_tag
from amp_story.models.schemas import RenderedFragment, TEXT_ELEMENT_TYPES

logger = get_logger(__name__)


class StoryRenderError(Exception):
    """Exception raised when a story cannot be rendered."""

    pass


class UnknownDiscriminatorError(StoryRenderError):
    """A type or template value has no entry in its dispatch table."""

    def __init__(self, kind: str, value: Any) -> None:
        self.kind = kind
        self.value = value
        super().__init__(f"Unknown {kind}: {value!r}")


class UnknownElementTypeError(UnknownDiscriminatorError):
    """Element ``type`` not present in the element registry."""

    def __init__(self, value: Any) -> None:
        super().__init__("element type", value)


class UnknownLayerTemplateError(UnknownDiscriminatorError):
    """Layer ``template`` not present in the layer registry."""

    def __init__(self, value: Any) -> None:
        super().__init__("layer template", value)


@dataclass
class RenderContext:
    """Per-call accumulator of element kinds that need extension scripts."""

    required_scripts: Dict[str, bool] = field(default_factory=dict)

    def require_script(self, element_kind: str) -> None:
        self.required_scripts[element_kind] = True


ElementRenderer = Callable[[Dict[str, Any], RenderContext], str]
LayerRenderer = Callable[[Dict[str, Any], RenderContext], str]


class StoryRenderer:
    """Dispatch-table renderer for story elements, layers, pages and stories."""

    def __init__(self, escape_text: bool = False) -> None:
        self.escape_text = escape_text
        self.logger: Any = logger.bind(component="story_renderer")  # structlog.BoundLoggerBase
        self.element_registry = self._setup_element_registry()
        self.layer_registry = self._setup_layer_registry()

    def _setup_element_registry(self) -> Dict[str, ElementRenderer]:
        """Setup element registry with render functions."""
        registry: Dict[str, ElementRenderer] = {
            element_type.value: self._text_element_renderer(
                COMPONENT_TO_HTML_TAG[element_type.value]
            )
            for element_type in sorted(TEXT_ELEMENT_TYPES, key=lambda t: t.value)
        }
        registry.update(
            {
                "container": self._render_container,
                "image": self._render_image,
                "video": self._render_video,
            }
        )
        return registry

    def _setup_layer_registry(self) -> Dict[str, LayerRenderer]:
        """Setup layer template registry with render functions."""
        return {
            "fill": self._render_fill_layer,
            "vertical": self._sequence_layer_renderer("vertical"),
            "horizontal": self._sequence_layer_renderer("horizontal"),
            "thirds": self._render_thirds_layer,
        }

    # Elements

    def _text_element_renderer(self, tag_name: str) -> ElementRenderer:
        def render_text_element(props: Dict[str, Any], context: RenderContext) -> str:
            text = props.pop("text")
            content = str(escape(text)) if self.escape_text else str(text)
            return render_tag(tag_name, props, content)

        return render_text_element

    def _render_container(self, props: Dict[str, Any], context: RenderContext) -> str:
        children = props.pop("elements")
        return render_tag(
            COMPONENT_TO_HTML_TAG["container"],
            props,
            self._render_elements(children, context),
        )

    def _render_image(self, props: Dict[str, Any], context: RenderContext) -> str:
        return render_tag(COMPONENT_TO_HTML_TAG["image"], props)

    def _render_video(self, props: Dict[str, Any], context: RenderContext) -> str:
        sources = props.pop("sources")
        context.require_script("video")
        return render_tag(
            COMPONENT_TO_HTML_TAG["video"],
            props,
            "".join(
                render_tag("source", {"source": source["source"], "type": f"video/{source['type']}"})
                for source in sources
            ),
        )

    def render_element(self, element: Mapping[str, Any], context: RenderContext) -> str:
        """
        Render one element through the element registry.

        Args:
            element: Element mapping with a ``type`` key
            context: Accumulator for required extension scripts

        Returns:
            Element markup

        Raises:
            UnknownElementTypeError: If ``type`` has no registered renderer
        """
        props = dict(element)
        element_type = props.pop("type", None)
        renderer = self.element_registry.get(element_type)
        if renderer is None:
            raise UnknownElementTypeError(element_type)
        return renderer(props, context)

    def _render_elements(self, elements: Sequence[Mapping[str, Any]], context: RenderContext) -> str:
        return "".join(self.render_element(element, context) for element in elements)

    # Layers

    @staticmethod
    def _render_grid_layer(template: str, children: str) -> str:
        return render_tag("amp-story-grid-layer", {"template": template}, children)

    def _render_fill_layer(self, layer: Dict[str, Any], context: RenderContext) -> str:
        return self._render_grid_layer("fill", self.render_element(layer["element"], context))

    def _sequence_layer_renderer(self, template: str) -> LayerRenderer:
        def render_sequence_layer(layer: Dict[str, Any], context: RenderContext) -> str:
            return self._render_grid_layer(
                template, self._render_elements(layer["elements"], context)
            )

        return render_sequence_layer

    def _render_thirds_layer(self, layer: Dict[str, Any], context: RenderContext) -> str:
        return self._render_grid_layer(
            "thirds",
            "".join(
                self.render_element({**element, "thirdIndex": third_index}, context)
                for third_index, element in enumerate(layer["elements"])
            ),
        )

    def render_layer(self, layer: Mapping[str, Any], context: RenderContext) -> str:
        """
        Render one layer through the layer registry.

        Raises:
            UnknownLayerTemplateError: If ``template`` has no registered renderer
        """
        props = dict(layer)
        template = props.pop("template", None)
        renderer = self.layer_registry.get(template)
        if renderer is None:
            raise UnknownLayerTemplateError(template)
        return renderer(props, context)

    # Pages and story

    def render_page(self, page: Mapping[str, Any], context: RenderContext) -> str:
        """Render a page and its layers, in order."""
        layers: List[Mapping[str, Any]] = page["layers"]
        self.logger.debug("Rendering page", page_id=page["id"], layer_count=len(layers))
        return render_tag(
            "amp-story-page",
            {"id": page["id"]},
            "".join(self.render_layer(layer, context) for layer in layers),
        )

    def render_story(self, pages: Sequence[Mapping[str, Any]]) -> RenderedFragment:
        """
        Render all pages inside <amp-story>.

        Args:
            pages: Page mappings in display order

        Returns:
            RenderedFragment with the markup and the element kinds whose
            extension scripts the document must load
        """
        context = RenderContext()
        html = render_tag(
            "amp-story", {}, "".join(self.render_page(page, context) for page in pages)
        )
        return RenderedFragment(html=html, required_scripts=list(context.required_scripts))


def get_supported_element_types() -> List[str]:
    """List element types with a registered renderer."""
    return list(StoryRenderer().element_registry)


def get_supported_layer_templates() -> List[str]:
    """List layer templates with a registered renderer."""
    return list(StoryRenderer().layer_registry)
