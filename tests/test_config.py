"""Tests for configuration models."""

import pytest
from pydantic import ValidationError
from website_scraper.models.config import (
    ConversionConfig,
    ExtractionConfig,
    MarkdownConfig,
    NetworkConfig,
    ScraperConfig,
)


class TestConversionConfig:
    """Tests for conversion settings."""

    def test_defaults(self):
        """Test default values."""
        config = ConversionConfig()
        assert config.extract_main_content is True
        assert config.classify_code is True
        assert config.strip_tags == ("script", "style")
        assert config.extraction.min_score == 1.0
        assert config.extraction.link_density_threshold == 0.5
        assert config.extraction.min_text_length == 200
        assert config.markdown.em_delimiter == "_"
        assert config.markdown.fence == "```"

    def test_frozen(self):
        """Test that conversion settings are immutable."""
        config = ConversionConfig()
        with pytest.raises(ValidationError):
            config.classify_code = False

    def test_hashable(self):
        """Test that equal markdown configs hash equally."""
        assert hash(MarkdownConfig()) == hash(MarkdownConfig())

    def test_rejects_unknown_fields(self):
        """Test extra='forbid'."""
        with pytest.raises(ValidationError):
            ConversionConfig(unknown=True)

    def test_rejects_bad_delimiter(self):
        """Test literal validation."""
        with pytest.raises(ValidationError):
            MarkdownConfig(em_delimiter="~")

    def test_threshold_bounds(self):
        """Test numeric bounds."""
        with pytest.raises(ValidationError):
            ExtractionConfig(link_density_threshold=1.5)

    def test_nested_dict(self):
        """Test building nested models from dicts."""
        config = ConversionConfig(markdown={"bullet_marker": "-"})
        assert config.markdown.bullet_marker == "-"


class TestScraperConfig:
    """Tests for the root configuration."""

    def test_defaults(self):
        """Test default values."""
        config = ScraperConfig()
        assert config.log_level == "WARNING"
        assert config.log_file is None
        assert config.network == NetworkConfig()

    def test_yaml_round_trip(self):
        """Test serializing to YAML and back."""
        config = ScraperConfig(
            conversion=ConversionConfig(classify_code=False, markdown=MarkdownConfig(heading_style="atx")),
            network=NetworkConfig(max_retries=5, user_agent="test-agent"),
            log_level="DEBUG",
        )
        assert ScraperConfig.from_yaml(config.to_yaml()) == config

    def test_from_yaml_partial(self):
        """Test that missing sections keep their defaults."""
        config = ScraperConfig.from_yaml("network:\n  max_retries: 1\n")
        assert config.network.max_retries == 1
        assert config.conversion == ConversionConfig()

    def test_from_empty_yaml(self):
        """Test an empty document."""
        assert ScraperConfig.from_yaml("") == ScraperConfig()

    def test_from_yaml_rejects_unknown(self):
        """Test unknown keys in YAML."""
        with pytest.raises(ValidationError):
            ScraperConfig.from_yaml("networking: {}\n")

    def test_from_yaml_file(self, tmp_path):
        """Test loading from a file."""
        path = tmp_path / "scraper.yaml"
        path.write_text("conversion:\n  extract_main_content: false\nlog_level: ERROR\n")
        config = ScraperConfig.from_yaml_file(path)
        assert config.conversion.extract_main_content is False
        assert config.log_level == "ERROR"
