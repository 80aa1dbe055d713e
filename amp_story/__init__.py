"""
AMP Story Renderer
==================

Convert declarative story definitions (pages of layered text, image, video and
container elements) into standalone AMP story HTML documents.

This package provides:
- Pydantic models describing stories, pages, layers and elements
- A recursive tag renderer driven by element and layer dispatch tables
- Document assembly with Jinja2 and AMP boilerplate
- JSON / YAML story loading with Cerberus validation
"""

__version__ = "1.0.0"
__author__ = "AMP Story Renderer Team"

from amp_story.core.rendering.html_generator import render, render_source

__all__ = ["render", "render_source", "__version__"]
