"""
HTML Generator
==============

Assemble complete AMP story documents: render the story body, then fill the
document template with the AMP boilerplate, the extension scripts the body
needs, metadata and default styles.
"""

from typing import Any, Dict, List, Mapping, Optional, Union
from pathlib import Path

import jinja2
from markupsafe import Markup

from amp_story.config.logging import get_logger
from amp_story.config.settings import Settings, get_settings
from amp_story.core.dsl.parser import StoryParseError, parse_story
from amp_story.core.rendering.components import AMP_ELEMENT_EXTENSIONS
from amp_story.core.rendering.css import render_css
from amp_story.core.rendering.formatter import format_html
from amp_story.core.rendering.story_renderer import StoryRenderError, StoryRenderer
from amp_story.core.rendering.tag import render_tag
from amp_story.models.schemas import Story

logger = get_logger(__name__)

TEMPLATE_NAME = "amp_story.html"

StoryInput = Union[Story, Mapping[str, Any]]


class AMPStoryHTMLGenerator:
    """Jinja2-based AMP story document generator."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.logger: Any = logger.bind(generator="amp_story")  # structlog.BoundLoggerBase
        self.story_renderer = StoryRenderer(escape_text=self.settings.escape_text)
        self._setup_jinja2_environment()

    def _setup_jinja2_environment(self) -> None:
        """Setup Jinja2 template environment."""
        template_dir = Path(__file__).parent / "templates"
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            autoescape=jinja2.select_autoescape(["html", "xml"]),
            keep_trailing_newline=True,
        )

    def element_script_urls(self) -> Dict[str, str]:
        """Extension script URL for each element kind that needs one."""
        return {"video": self.settings.amp_video_script_url}

    def render_element_scripts(self, required_scripts: List[str]) -> str:
        """
        Render one extension <script> per required element kind.

        Args:
            required_scripts: Element kinds collected while rendering the story

        Returns:
            Script tags joined by newlines, "" when nothing is required
        """
        urls = self.element_script_urls()
        return "\n".join(
            render_tag(
                "script",
                {
                    "async": True,
                    "custom-element": AMP_ELEMENT_EXTENSIONS[kind],
                    "src": urls[kind],
                },
                "",
            )
            for kind in required_scripts
        )

    def generate(self, story: StoryInput) -> str:
        """
        Generate a complete AMP story document.

        Args:
            story: Story model or plain mapping with title, canonicalUrl,
                defaultStyles and pages

        Returns:
            Generated HTML string

        Raises:
            StoryRenderError: If an element type or layer template is unknown
        """
        data = story.to_render_input() if isinstance(story, Story) else story
        pages = data["pages"]

        try:
            self.logger.info("Generating AMP story document", page_count=len(pages))

            # The body must be rendered first: it determines which extension scripts are needed
            fragment = self.story_renderer.render_story(pages)

            template = self.env.get_template(TEMPLATE_NAME)
            html = template.render(
                lang=self.settings.document_lang,
                amp_runtime_url=self.settings.amp_runtime_url,
                amp_story_script_url=self.settings.amp_story_script_url,
                element_scripts=Markup(self.render_element_scripts(fragment.required_scripts)),
                title=data["title"],
                canonical_url=data["canonicalUrl"],
                default_css=Markup(render_css(data.get("defaultStyles"))),
                story=Markup(fragment.html),
            )
        except StoryRenderError as e:
            self.logger.error("AMP story generation failed", error=str(e))
            raise

        if self.settings.pretty_print:
            html = format_html(html, indent_size=self.settings.indent_size)

        self.logger.info(
            "AMP story generation completed",
            html_length=len(html),
            required_scripts=fragment.required_scripts,
        )
        return html


def render(story: StoryInput, settings: Optional[Settings] = None) -> str:
    """
    Render a story to a complete AMP story HTML document.

    Args:
        story: Story model or plain mapping
        settings: Optional settings override

    Returns:
        Generated HTML string
    """
    return AMPStoryHTMLGenerator(settings).generate(story)


def render_source(
    content: str, parser_type: Optional[str] = None, settings: Optional[Settings] = None
) -> str:
    """
    Load a JSON or YAML story and render it.

    Raises:
        StoryParseError: If the content is not a valid story
    """
    result = parse_story(content, parser_type)
    if not result.success or result.story is None:
        raise StoryParseError(result.errors)
    return render(result.story, settings)
