"""Pydantic configuration models for website_scraper."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field


class ExtractionConfig(BaseModel):
    """Thresholds and weights for main-content extraction."""

    min_score: float = Field(
        1.0,
        description="Minimum aggregate score the winning candidate must reach",
    )
    link_density_threshold: float = Field(
        0.5,
        ge=0,
        le=1,
        description="Containers inside the winner above this link density are pruned (if short)",
    )
    min_text_length: int = Field(
        200,
        ge=0,
        description="Link-heavy containers shorter than this many characters are pruned",
    )
    parent_share: float = Field(1.0, ge=0, le=1, description="Share of a score given to the parent candidate")
    grandparent_share: float = Field(
        0.5,
        ge=0,
        le=1,
        description="Share of a score given to the grandparent candidate",
    )
    hint_weight: float = Field(25.0, ge=0, description="Bonus/penalty for class and id hints on container candidates")

    model_config = {"extra": "forbid", "frozen": True}


class MarkdownConfig(BaseModel):
    """Markdown flavour choices for the serializer."""

    em_delimiter: Literal["_", "*"] = Field("_", description="Delimiter for emphasis")
    strong_delimiter: Literal["**", "__"] = Field("**", description="Delimiter for strong emphasis")
    bullet_marker: Literal["*", "-", "+"] = Field("*", description="Bullet for list items")
    fence: Literal["```", "~~~"] = Field("```", description="Fence for code blocks")
    heading_style: Literal["setext", "atx"] = Field(
        "setext",
        description="setext underlines h1/h2; atx uses '#' prefixes for every level",
    )

    model_config = {"extra": "forbid", "frozen": True}


class ConversionConfig(BaseModel):
    """
    Settings for a single HTML to Markdown conversion.

    Immutable, so one instance can be shared by concurrent conversions.

    Example:
        config = ConversionConfig(markdown={"bullet_marker": "-"})
        markdown = convert(html, "https://example.com", config)
    """

    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    markdown: MarkdownConfig = Field(default_factory=MarkdownConfig)
    extract_main_content: bool = Field(
        True,
        description="Keep only the highest scoring content subtree (False = whole document)",
    )
    classify_code: bool = Field(True, description="Tag fenced code blocks with a guessed language")
    strip_tags: tuple[str, ...] = Field(
        ("script", "style"),
        description="Elements removed before scoring and serialization",
    )

    model_config = {"extra": "forbid", "frozen": True}


class NetworkConfig(BaseModel):
    """Configuration for HTTP client and network behavior."""

    proxy: Optional[str] = Field(None, description="HTTP/HTTPS proxy URL")
    user_agent: Optional[str] = Field(None, description="Custom User-Agent header")
    max_retries: int = Field(3, ge=0, description="Maximum retry attempts for failed requests")
    timeout: float = Field(30.0, gt=0, description="Request timeout in seconds")
    max_content_size: int = Field(
        50 * 1024 * 1024,
        ge=1,
        description="Maximum response size in bytes",
    )

    model_config = {"extra": "forbid"}


class ScraperConfig(BaseModel):
    """
    Root configuration model for website_scraper.

    Example:
        config = ScraperConfig(
            network=NetworkConfig(max_retries=1),
            conversion=ConversionConfig(classify_code=False),
        )

    YAML format:
        conversion:
          extract_main_content: true
          markdown:
            bullet_marker: "-"
        network:
          max_retries: 5
        log_level: DEBUG
    """

    conversion: ConversionConfig = Field(default_factory=ConversionConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "WARNING",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ScraperConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "ScraperConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text())
