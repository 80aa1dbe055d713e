"""
Component Tag Table
===================

Static tables mapping story component names to markup.
"""

from typing import Dict

COMPONENT_TO_HTML_TAG: Dict[str, str] = {
    "heading": "h1",
    "heading1": "h1",
    "heading2": "h2",
    "heading3": "h3",
    "heading4": "h4",
    "heading5": "h5",
    "heading6": "h6",
    "paragraph": "p",
    "container": "div",
    "image": "amp-img",
    "video": "amp-video",
}

# Element kind -> AMP extension providing its custom element
AMP_ELEMENT_EXTENSIONS: Dict[str, str] = {
    "video": "amp-video",
}
