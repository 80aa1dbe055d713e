"""
Unit Tests for Story Parser
===========================

Tests for JSON / YAML story loading and validation.
"""

import copy
import json

import pytest

from amp_story.core.dsl.parser import (
    JSONStoryParser, StoryParseError, StoryParserFactory, StoryValidator,
    YAMLStoryParser, parse_story, validate_story_syntax
)
from amp_story.models.schemas import ElementType, LayerTemplate

from tests.utils.assertions import assert_failed_parse_result, assert_successful_parse_result
from tests.utils.data_generators import StoryDataGenerator


class TestStoryParseError:
    """Test parse error."""

    def test_errors_are_kept(self):
        """The error carries its messages."""
        error = StoryParseError(["a", "b"])
        assert error.errors == ["a", "b"]
        assert str(error) == "Invalid story: a; b"


class TestStoryValidator:
    """Test story validation."""

    @pytest.fixture
    def validator(self):
        """Create story validator instance."""
        return StoryValidator()

    def test_validator_initialization(self, validator):
        """Validator sets up its schemas."""
        assert "pages" in validator.story_schema
        assert "layers" in validator.page_schema
        assert "template" in validator.layer_schema
        assert "type" in validator.element_schema

    def test_valid_story(self, validator, full_story):
        """A complete story validates."""
        is_valid, errors, warnings = validator.validate_story(full_story)
        assert is_valid is True
        assert errors == []
        assert isinstance(warnings, list)

    def test_missing_required_fields(self, validator):
        """Title, canonical URL and pages are required."""
        is_valid, errors, _ = validator.validate_story({})
        assert is_valid is False
        assert any(error.startswith("title:") for error in errors)
        assert any(error.startswith("canonicalUrl:") for error in errors)
        assert any(error.startswith("pages:") for error in errors)

    def test_unknown_template(self, validator, minimal_story):
        """Templates outside the layer table are rejected."""
        story = copy.deepcopy(minimal_story)
        story["pages"][0]["layers"][0]["template"] = "diagonal"
        is_valid, errors, _ = validator.validate_story(story)
        assert is_valid is False
        assert any("template" in error for error in errors)

    def test_unknown_element_type(self, validator, minimal_story):
        """Element types outside the element table are rejected with their path."""
        story = copy.deepcopy(minimal_story)
        story["pages"][0]["layers"][0]["element"] = {"type": "bogus"}
        is_valid, errors, _ = validator.validate_story(story)
        assert is_valid is False
        assert "pages[0].layers[0].element: Unknown element type 'bogus'" in errors

    def test_unknown_nested_element_type(self, validator, minimal_story):
        """Unknown types deep inside containers are found."""
        story = copy.deepcopy(minimal_story)
        story["pages"][0]["layers"][0]["element"] = {
            "type": "container",
            "elements": [{"type": "container", "elements": [{"type": "marquee"}]}],
        }
        is_valid, errors, _ = validator.validate_story(story)
        assert is_valid is False
        assert (
            "pages[0].layers[0].element.elements[0].elements[0]: Unknown element type 'marquee'"
            in errors
        )

    def test_fill_requires_element(self, validator, minimal_story):
        """Fill layers need an element."""
        story = copy.deepcopy(minimal_story)
        story["pages"][0]["layers"][0] = {"template": "fill"}
        is_valid, errors, _ = validator.validate_story(story)
        assert is_valid is False
        assert "pages[0].layers[0]: Layer template 'fill' requires 'element'" in errors

    def test_vertical_requires_elements(self, validator, minimal_story):
        """Sequence layers need an element list."""
        story = copy.deepcopy(minimal_story)
        story["pages"][0]["layers"][0] = {"template": "vertical"}
        _, errors, _ = validator.validate_story(story)
        assert "pages[0].layers[0]: Layer template 'vertical' requires 'elements'" in errors

    def test_type_specific_fields(self, validator, minimal_story):
        """Text, container and video elements need their content fields."""
        story = copy.deepcopy(minimal_story)
        story["pages"][0]["layers"][0] = {
            "template": "vertical",
            "elements": [{"type": "heading1"}, {"type": "container"}, {"type": "video"}],
        }
        _, errors, _ = validator.validate_story(story)
        assert "pages[0].layers[0].elements[0]: Element type 'heading1' requires 'text'" in errors
        assert "pages[0].layers[0].elements[1]: Element type 'container' requires 'elements'" in errors
        assert "pages[0].layers[0].elements[2]: Element type 'video' requires 'sources'" in errors

    def test_children_only_on_containers(self, validator, minimal_story):
        """Only containers may hold child elements."""
        story = copy.deepcopy(minimal_story)
        story["pages"][0]["layers"][0]["element"]["elements"] = []
        _, errors, _ = validator.validate_story(story)
        assert any("cannot have child elements" in error for error in errors)

    def test_image_without_src_warns(self, validator, minimal_story):
        """Images without src produce a warning."""
        story = copy.deepcopy(minimal_story)
        story["pages"][0]["layers"][0]["element"] = {"type": "image"}
        is_valid, _, warnings = validator.validate_story(story)
        assert is_valid is True
        assert "pages[0].layers[0].element: Image element should have 'src' property" in warnings

    def test_duplicate_page_ids_warn(self, validator, minimal_story):
        """Repeated page ids produce a warning."""
        story = copy.deepcopy(minimal_story)
        story["pages"].append(copy.deepcopy(story["pages"][0]))
        is_valid, _, warnings = validator.validate_story(story)
        assert is_valid is True
        assert any("Duplicate page id 'p1'" in warning for warning in warnings)

    def test_crowded_thirds_warn(self, validator, minimal_story):
        """Thirds layers with more than three elements produce a warning."""
        story = copy.deepcopy(minimal_story)
        story["pages"][0]["layers"][0] = {
            "template": "thirds",
            "elements": [{"type": "paragraph", "text": str(i)} for i in range(4)],
        }
        _, _, warnings = validator.validate_story(story)
        assert any("only 3 thirds exist" in warning for warning in warnings)

    def test_empty_story_warns(self, validator, minimal_story):
        """Stories without pages produce a warning."""
        story = copy.deepcopy(minimal_story)
        story["pages"] = []
        is_valid, _, warnings = validator.validate_story(story)
        assert is_valid is True
        assert "Story has no pages" in warnings


class TestJSONStoryParser:
    """Test JSON story parsing."""

    @pytest.fixture
    def parser(self):
        """Create JSON parser instance."""
        return JSONStoryParser()

    def test_parse_valid(self, parser, full_story_json):
        """Valid JSON becomes a Story model."""
        result = parser.parse(full_story_json)
        assert_successful_parse_result(result)
        assert result.story.title == "Full Story"
        assert result.story.canonical_url == "https://example.com/stories/full"
        assert [page.id for page in result.story.pages] == ["cover", "video-page", "gallery"]
        assert result.processing_time >= 0

    def test_extra_props_survive(self, parser, full_story_json):
        """Element attribute props are kept on the model."""
        result = parser.parse(full_story_json)
        image = result.story.pages[0].layers[0].element
        assert image.type == ElementType.IMAGE
        assert image.model_dump()["src"] == "https://cdn.example.com/cover.jpg"

    def test_parse_invalid_syntax(self, parser):
        """Broken JSON reports its position."""
        result = parser.parse('{"title": "x", "pages": [')
        assert_failed_parse_result(result, ["Invalid JSON syntax"])

    def test_parse_non_object(self, parser):
        """Top-level JSON must be an object."""
        result = parser.parse("[1, 2]")
        assert_failed_parse_result(result, ["must be a dictionary/object"])

    def test_validate_syntax(self, parser):
        """Syntax validation only checks JSON."""
        assert parser.validate_syntax('{"a": 1}') is True
        assert parser.validate_syntax("{") is False


class TestYAMLStoryParser:
    """Test YAML story parsing."""

    @pytest.fixture
    def parser(self):
        """Create YAML parser instance."""
        return YAMLStoryParser()

    def test_parse_valid(self, parser):
        """Valid YAML becomes a Story model."""
        result = parser.parse(StoryDataGenerator.generate_yaml_story())
        assert_successful_parse_result(result)
        layer = result.story.pages[0].layers[0]
        assert layer.template == LayerTemplate.VERTICAL
        assert layer.elements[0].text == "From YAML"

    def test_parse_invalid_syntax(self, parser):
        """Broken YAML fails."""
        result = parser.parse("title: [unclosed")
        assert_failed_parse_result(result, ["Invalid YAML syntax"])

    def test_parse_empty_document(self, parser):
        """An empty YAML document fails."""
        result = parser.parse("---\n")
        assert_failed_parse_result(result, ["Empty YAML document"])


class TestStoryParserFactory:
    """Test parser factory."""

    def test_create_parsers(self):
        """Known parser types are created."""
        assert isinstance(StoryParserFactory.create_parser("json"), JSONStoryParser)
        assert isinstance(StoryParserFactory.create_parser("yaml"), YAMLStoryParser)

    def test_unsupported_parser(self):
        """Unknown parser types are rejected."""
        with pytest.raises(ValueError, match="Unsupported parser type"):
            StoryParserFactory.create_parser("xml")

    @pytest.mark.parametrize("content,expected", [
        ('{"title": "x"}', "json"),
        ("---\ntitle: x", "yaml"),
        ("title: x", "yaml"),
        ("[]", "json"),
    ])
    def test_detect_parser_type(self, content, expected):
        """Format is detected from content."""
        assert StoryParserFactory.detect_parser_type(content) == expected


class TestParseStory:
    """Test module-level helpers."""

    def test_parse_story_detects_json(self, full_story_json):
        """JSON content is parsed without a type hint."""
        assert_successful_parse_result(parse_story(full_story_json))

    def test_parse_story_detects_yaml(self):
        """YAML content is parsed without a type hint."""
        assert_successful_parse_result(parse_story(StoryDataGenerator.generate_yaml_story()))

    def test_parse_story_empty(self):
        """Empty content fails."""
        assert_failed_parse_result(parse_story("   "), ["Empty story content provided"])

    def test_parse_story_unsupported_type(self, full_story_json):
        """Unsupported type overrides fail."""
        assert_failed_parse_result(parse_story(full_story_json, "toml"), ["Unsupported parser type"])

    def test_parse_story_unknown_type(self, minimal_story):
        """Unknown element types fail loading."""
        story = copy.deepcopy(minimal_story)
        story["pages"][0]["layers"][0]["element"]["type"] = "bogus"
        assert_failed_parse_result(parse_story(json.dumps(story)), ["Unknown element type 'bogus'"])

    def test_validate_story_syntax(self):
        """Syntax checks work for both formats."""
        assert validate_story_syntax('{"a": 1}') is True
        assert validate_story_syntax("a: 1") is True
        assert validate_story_syntax("") is False
        assert validate_story_syntax('{"a": 1}', "xml") is False
