"""
Test Configuration
==================

Pytest configuration with settings override and shared story fixtures.
"""

import copy
import json
from typing import Any, Dict, Generator

import pytest
from pydantic_settings import SettingsConfigDict

import amp_story.config.settings as settings_module
from amp_story.config.settings import Settings
from amp_story.core.rendering.html_generator import AMPStoryHTMLGenerator
from amp_story.core.rendering.story_renderer import StoryRenderer

from tests.utils.data_generators import StoryDataGenerator


# Test settings override
class TestSettings(Settings):
    """Test-specific settings."""

    environment: str = "testing"
    debug: bool = True
    log_level: str = "DEBUG"

    model_config = SettingsConfigDict(env_file=".env.test", env_prefix="AMP_STORY_TEST_")


@pytest.fixture(scope="session")
def test_settings() -> TestSettings:
    """Test settings fixture."""
    return TestSettings()


@pytest.fixture(scope="session", autouse=True)
def override_settings(test_settings: TestSettings) -> Generator[TestSettings, None, None]:
    """Override application settings for testing."""
    previous = settings_module.settings
    settings_module.settings = test_settings
    yield test_settings
    settings_module.settings = previous


@pytest.fixture
def generator(test_settings: TestSettings) -> AMPStoryHTMLGenerator:
    """Document generator using test settings."""
    return AMPStoryHTMLGenerator(test_settings)


@pytest.fixture
def raw_generator(test_settings: TestSettings) -> AMPStoryHTMLGenerator:
    """Document generator without pretty printing."""
    return AMPStoryHTMLGenerator(test_settings.model_copy(update={"pretty_print": False}))


@pytest.fixture
def story_renderer() -> StoryRenderer:
    """Story renderer instance."""
    return StoryRenderer()


@pytest.fixture
def minimal_story() -> Dict[str, Any]:
    """The one-paragraph story."""
    return StoryDataGenerator.generate_minimal_story()


@pytest.fixture
def full_story() -> Dict[str, Any]:
    """Story with every element type and layer template."""
    return StoryDataGenerator.generate_full_story()


@pytest.fixture
def full_story_json(full_story: Dict[str, Any]) -> str:
    """Full story serialized as JSON."""
    return json.dumps(copy.deepcopy(full_story))
