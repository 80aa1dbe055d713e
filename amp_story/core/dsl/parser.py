"""
Story Parser
============

Load stories written as JSON or YAML, validate them and convert them into
Story models ready for rendering.
"""

from typing import Dict, List, Any, Optional, Tuple
import json
import time
from abc import ABC, abstractmethod

import yaml  # type: ignore[import-untyped]
from cerberus import Validator  # type: ignore[import-untyped]
from pydantic import ValidationError

from amp_story.config.logging import get_logger
from amp_story.models.schemas import (
    ElementType,
    LayerTemplate,
    ParseResult,
    Story,
    TEXT_ELEMENT_TYPES,
)

logger = get_logger(__name__)


class StoryParseError(Exception):
    """Exception raised when story content cannot be loaded."""

    def __init__(self, errors: List[str]) -> None:
        self.errors = list(errors)
        super().__init__("Invalid story: " + "; ".join(self.errors))


class StoryValidator:
    """Story validation using Cerberus schemas plus recursive element checks."""

    def __init__(self) -> None:
        self.logger: Any = logger.bind(component="validator")  # structlog.BoundLoggerBase
        self._setup_schemas()

    def _setup_schemas(self) -> None:
        """Setup validation schemas."""
        # Elements carry arbitrary attribute props; the recursive walk checks the rest
        self.element_schema: Dict[str, Any] = {
            "type": {"type": "string", "required": True},
            "text": {"type": "string"},
            "elements": {"type": "list"},
            "sources": {
                "type": "list",
                "schema": {
                    "type": "dict",
                    "schema": {
                        "source": {"type": "string", "required": True},
                        "type": {"type": "string", "required": True},
                    },
                },
            },
        }
        element_rule = {"type": "dict", "allow_unknown": True, "schema": self.element_schema}

        self.layer_schema: Dict[str, Any] = {
            "template": {
                "type": "string",
                "required": True,
                "allowed": [t.value for t in LayerTemplate],
            },
            "element": element_rule,
            "elements": {"type": "list", "schema": element_rule},
        }

        self.page_schema: Dict[str, Any] = {
            "id": {"type": "string", "required": True, "empty": False},
            "layers": {
                "type": "list",
                "required": True,
                "schema": {"type": "dict", "schema": self.layer_schema},
            },
        }

        self.story_schema: Dict[str, Any] = {
            "title": {"type": "string", "required": True},
            "canonicalUrl": {"type": "string", "required": True},
            "defaultStyles": {"type": "dict", "default": {}},
            "pages": {
                "type": "list",
                "required": True,
                "schema": {"type": "dict", "schema": self.page_schema},
            },
        }

    def validate_story(self, data: Dict[str, Any]) -> Tuple[bool, List[str], List[str]]:
        """
        Validate story structure.

        Args:
            data: Story data to validate

        Returns:
            Tuple of (is_valid, errors, warnings)
        """
        validator = Validator(self.story_schema)  # type: ignore[misc]
        validator.allow_unknown = True  # type: ignore[attr-defined]

        is_valid = validator.validate(data)  # type: ignore[misc]
        errors: List[str] = []
        warnings: List[str] = []

        if not is_valid:
            errors.extend(self._format_validation_errors(validator.errors))  # type: ignore[attr-defined]

        custom_errors, custom_warnings = self._perform_custom_validations(data)
        errors.extend(custom_errors)
        warnings.extend(custom_warnings)

        return is_valid and len(custom_errors) == 0, errors, warnings  # type: ignore[misc]

    def _format_validation_errors(self, errors: Any, path: str = "") -> List[str]:  # type: ignore[misc]
        """Format Cerberus validation errors into readable messages."""
        formatted_errors: List[str] = []

        for field, error_info in errors.items():  # type: ignore[misc]
            current_path = f"{path}.{field}" if path else str(field)

            for error in error_info if isinstance(error_info, list) else [error_info]:  # type: ignore[misc]
                if isinstance(error, dict):
                    formatted_errors.extend(self._format_validation_errors(error, current_path))
                else:
                    formatted_errors.append(f"{current_path}: {error}")

        return formatted_errors

    def _perform_custom_validations(self, data: Dict[str, Any]) -> Tuple[List[str], List[str]]:
        """Walk every page and layer and validate their elements."""
        errors: List[str] = []
        warnings: List[str] = []

        pages = data.get("pages")
        if not isinstance(pages, list):
            return errors, warnings

        if not pages:
            warnings.append("Story has no pages")

        seen_ids: Dict[str, int] = {}
        for i, page in enumerate(pages):
            if not isinstance(page, dict):
                continue
            page_id = page.get("id")
            if isinstance(page_id, str):
                if page_id in seen_ids:
                    warnings.append(
                        f"pages[{i}]: Duplicate page id '{page_id}' (first used by pages[{seen_ids[page_id]}])"
                    )
                seen_ids.setdefault(page_id, i)

            for j, layer in enumerate(page.get("layers") or []):
                if not isinstance(layer, dict):
                    continue
                layer_errors, layer_warnings = self._validate_layer(layer, f"pages[{i}].layers[{j}]")
                errors.extend(layer_errors)
                warnings.extend(layer_warnings)

        return errors, warnings

    def _validate_layer(self, layer: Dict[str, Any], path: str) -> Tuple[List[str], List[str]]:
        """Validate the elements a layer holds for its template."""
        errors: List[str] = []
        warnings: List[str] = []

        template = layer.get("template")
        if template == LayerTemplate.FILL.value:
            if "element" not in layer:
                errors.append(f"{path}: Layer template 'fill' requires 'element'")
                return errors, warnings
            return self._validate_element(layer["element"], f"{path}.element")

        if template not in {t.value for t in LayerTemplate}:
            return errors, warnings

        if "elements" not in layer:
            errors.append(f"{path}: Layer template '{template}' requires 'elements'")
            return errors, warnings

        elements = layer["elements"] if isinstance(layer["elements"], list) else []
        if template == LayerTemplate.THIRDS.value and len(elements) > 3:
            warnings.append(f"{path}: Thirds layer has {len(elements)} elements, only 3 thirds exist")

        for k, element in enumerate(elements):
            element_errors, element_warnings = self._validate_element(element, f"{path}.elements[{k}]")
            errors.extend(element_errors)
            warnings.extend(element_warnings)

        return errors, warnings

    def _validate_element(self, element: Any, path: str) -> Tuple[List[str], List[str]]:
        """Validate an element and, for containers, its children."""
        errors: List[str] = []
        warnings: List[str] = []

        if not isinstance(element, dict):
            errors.append(f"{path}: Element must be a dictionary/object, got {type(element).__name__}")
            return errors, warnings

        element_type = element.get("type")
        known_types = {t.value for t in ElementType}
        if element_type not in known_types:
            errors.append(f"{path}: Unknown element type '{element_type}'")
            return errors, warnings

        if element_type in {t.value for t in TEXT_ELEMENT_TYPES} and "text" not in element:
            errors.append(f"{path}: Element type '{element_type}' requires 'text'")

        if element_type == ElementType.VIDEO.value and "sources" not in element:
            errors.append(f"{path}: Element type 'video' requires 'sources'")

        if element_type == ElementType.IMAGE.value and not element.get("src"):
            warnings.append(f"{path}: Image element should have 'src' property")

        children = element.get("elements")
        if element_type == ElementType.CONTAINER.value:
            if children is None:
                errors.append(f"{path}: Element type 'container' requires 'elements'")
        elif children is not None:
            errors.append(f"{path}: Element type '{element_type}' cannot have child elements")
            return errors, warnings

        for i, child in enumerate(children or []):
            child_errors, child_warnings = self._validate_element(child, f"{path}.elements[{i}]")
            errors.extend(child_errors)
            warnings.extend(child_warnings)

        return errors, warnings


class BaseStoryParser(ABC):
    """Abstract base class for story parsers."""

    def __init__(self) -> None:
        self.validator = StoryValidator()

    @abstractmethod
    def load(self, content: str) -> Any:
        """Deserialize raw content."""
        pass

    @abstractmethod
    def validate_syntax(self, content: str) -> bool:
        """Validate syntax without full parsing."""
        pass

    def parse(self, content: str) -> ParseResult:
        """
        Parse story content into a Story model.

        Args:
            content: Raw story content as string

        Returns:
            ParseResult containing the story or errors
        """
        start_time = time.time()

        try:
            raw_data = self.load(content)
        except StoryParseError as e:
            self.logger.error("Story loading failed", errors=e.errors)
            return ParseResult(
                success=False, errors=e.errors, processing_time=time.time() - start_time
            )

        if not isinstance(raw_data, dict):
            return ParseResult(
                success=False,
                errors=[f"Story content must be a dictionary/object, got {type(raw_data).__name__}"],
                processing_time=time.time() - start_time,
            )

        is_valid, errors, warnings = self.validator.validate_story(raw_data)
        self.logger.debug(
            "Story validation finished",
            is_valid=is_valid,
            error_count=len(errors),
            warning_count=len(warnings),
        )

        if not is_valid:
            return ParseResult(
                success=False,
                errors=errors,
                warnings=warnings,
                processing_time=time.time() - start_time,
            )

        try:
            story = Story.model_validate(raw_data)
        except ValidationError as e:
            error_list = [
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
            ]
            self.logger.error("Story model conversion failed", errors=error_list)
            return ParseResult(
                success=False,
                errors=error_list,
                warnings=warnings,
                processing_time=time.time() - start_time,
            )

        return ParseResult(
            success=True,
            story=story,
            warnings=warnings,
            processing_time=time.time() - start_time,
        )


class JSONStoryParser(BaseStoryParser):
    """JSON story parser."""

    def __init__(self) -> None:
        super().__init__()
        self.logger: Any = logger.bind(parser="json")  # structlog.BoundLoggerBase

    def load(self, content: str) -> Any:
        self.logger.info("Parsing JSON story content")
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise StoryParseError(
                [f"Invalid JSON syntax at line {e.lineno}, column {e.colno}: {e.msg}"]
            ) from e

    def validate_syntax(self, content: str) -> bool:
        try:
            json.loads(content)
            return True
        except json.JSONDecodeError:
            return False


class YAMLStoryParser(BaseStoryParser):
    """YAML story parser."""

    def __init__(self) -> None:
        super().__init__()
        self.logger: Any = logger.bind(parser="yaml")  # structlog.BoundLoggerBase

    def load(self, content: str) -> Any:
        self.logger.info("Parsing YAML story content")
        try:
            raw_data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise StoryParseError([f"Invalid YAML syntax: {e}"]) from e
        if raw_data is None:
            raise StoryParseError(["Empty YAML document"])
        return raw_data

    def validate_syntax(self, content: str) -> bool:
        try:
            yaml.safe_load(content)
            return True
        except yaml.YAMLError:
            return False


class StoryParserFactory:
    """Factory for creating story parsers based on content type."""

    _parsers = {
        "json": JSONStoryParser,
        "yaml": YAMLStoryParser,
    }

    @classmethod
    def create_parser(cls, parser_type: str) -> BaseStoryParser:
        """
        Create a story parser instance.

        Args:
            parser_type: Type of parser ("json", "yaml")

        Raises:
            ValueError: If parser type is not supported
        """
        if parser_type not in cls._parsers:
            raise ValueError(f"Unsupported parser type: {parser_type}")

        return cls._parsers[parser_type]()

    @classmethod
    def detect_parser_type(cls, content: str) -> str:
        """Detect parser type from content."""
        content = content.strip()
        if content.startswith(("{", "[")):
            return "json"
        elif content.startswith("---"):
            return "yaml"
        else:
            try:
                json.loads(content)
                return "json"
            except json.JSONDecodeError:
                return "yaml"


def parse_story(content: str, parser_type: Optional[str] = None) -> ParseResult:
    """
    Parse story content using the appropriate parser.

    Args:
        content: Raw JSON or YAML story
        parser_type: Optional parser type override

    Returns:
        ParseResult containing the story or errors
    """
    if not content or not content.strip():
        return ParseResult(success=False, errors=["Empty story content provided"])

    if not parser_type:
        parser_type = StoryParserFactory.detect_parser_type(content)

    try:
        parser = StoryParserFactory.create_parser(parser_type)
    except ValueError as e:
        return ParseResult(success=False, errors=[str(e)])
    return parser.parse(content)


def validate_story_syntax(content: str, parser_type: Optional[str] = None) -> bool:
    """Validate story syntax without full parsing."""
    if not content or not content.strip():
        return False

    if not parser_type:
        parser_type = StoryParserFactory.detect_parser_type(content)

    try:
        parser = StoryParserFactory.create_parser(parser_type)
    except ValueError:
        return False
    return parser.validate_syntax(content)
