"""
Rendering Module
===============

AMP story HTML generation.

Components:
- tag: HTML tag serialization
- components: Component name to markup tag table
- css: Style mapping to CSS text
- formatter: Output re-indentation
- story_renderer: Element dispatch and layer/page/story assembly
- html_generator: Full document assembly
"""
