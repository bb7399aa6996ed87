from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, field_validator

from .errors import ConfigurationError

CONFIG_FILENAME = "newsdesk.yml"
DEFAULT_ENVIRONMENT = "master"
FALLBACK_ENVIRONMENTS = ("master", "main")

SPACE_ID_VAR = "CONTENTFUL_SPACE_ID"
ACCESS_TOKEN_VAR = "CONTENTFUL_CDA_TOKEN"
ENVIRONMENT_VAR = "CONTENTFUL_ENV"


class SourceConfig(BaseModel):
    """Connection settings for the content delivery API."""

    space_id: str | None = Field(default=None, description="Contentful space identifier.")
    access_token: str | None = Field(
        default=None,
        description="Content Delivery API token (sent as a bearer token).",
    )
    environment: str | None = Field(
        default=None,
        description="Preferred environment; tried before the fallback environments.",
    )
    content_type: str = Field(default="newsBlog")
    limit: int = Field(default=1000, ge=1, le=1000)
    include: int = Field(default=2, ge=0, le=10)
    api_host: str = Field(default="https://cdn.contentful.com")
    timeout: float = Field(default=30.0, gt=0)

    @field_validator("space_id", "access_token", "environment", mode="before")
    def _blank_to_none(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("api_host")
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def environment_candidates(self) -> list[str]:
        """Environments to try in order, preferred one first, without duplicates."""
        ordered = [self.environment or DEFAULT_ENVIRONMENT, *FALLBACK_ENVIRONMENTS]
        return list(dict.fromkeys(ordered))

    def require_credentials(self) -> None:
        missing = []
        if not self.space_id:
            missing.append(SPACE_ID_VAR)
        if not self.access_token:
            missing.append(ACCESS_TOKEN_VAR)
        if missing:
            raise ConfigurationError(f"Set {' and '.join(missing)} before building.")


class SiteConfig(BaseModel):
    """Public site identity used for canonical URLs and page metadata."""

    base_url: str = Field(default="https://esegames.com")
    name: str = Field(default="ĚSĚGAMES", description="Suffix used in article page titles.")
    organization: str = Field(
        default="ĚSĚGAMES",
        description="Organization named as author and publisher in linked data.",
    )
    language: str = Field(default="en")
    listing_path: str = Field(default="/NEWS", description="URL path of the listing page.")
    articles_path: str = Field(
        default="news",
        description="Directory (relative to output_dir) and URL prefix for article pages.",
    )
    stylesheets: list[str] = Field(
        default_factory=lambda: ["/nicepage.css", "/index.css", "/FAQstyles.css", "/news.css"]
    )
    scripts: list[str] = Field(default_factory=lambda: ["/FAQscript.js"])

    @field_validator("base_url")
    def _normalize_base_url(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("articles_path")
    def _normalize_articles_path(cls, value: str) -> str:
        cleaned = value.strip().strip("/")
        if not cleaned:
            raise ValueError("articles_path cannot be empty")
        return cleaned

    @property
    def listing_url(self) -> str:
        return f"{self.base_url}/{self.listing_path.lstrip('/')}"

    def article_path(self, slug: str) -> str:
        return f"/{self.articles_path}/{slug}/"

    def article_url(self, slug: str) -> str:
        return f"{self.base_url}{self.article_path(slug)}"


class ListingConfig(BaseModel):
    """Where and how cards are injected into the listing page."""

    template: Path = Field(default=Path("NEWS.html"))
    start_marker: str = Field(default="<!-- START:NEWS-LIST -->")
    end_marker: str = Field(default="<!-- END:NEWS-LIST -->")
    lead_paragraphs: int = Field(
        default=1,
        ge=0,
        description="Number of leading paragraphs shown before the collapsible remainder.",
    )

    @field_validator("template", mode="before")
    def _ensure_path(cls, value: Any) -> Path:
        return Path(value)


class FeedConfig(BaseModel):
    """Options controlling sitemap and RSS generation."""

    enabled: bool = Field(default=True, description="Toggle sitemap and RSS generation.")
    rss_filename: str = Field(default="news.xml")
    sitemap_filename: str = Field(default="sitemap.xml")
    title: str = Field(default="ÉSÈGAMES News")
    description: str = Field(default="Updates from ÉSÈGAMES")
    description_length: int = Field(default=300, ge=1)
    meta_description_length: int = Field(default=155, ge=1)

    @property
    def rss_path(self) -> str:
        return f"/{self.rss_filename.lstrip('/')}"


class Config(BaseModel):
    project_name: str = Field(default="Newsdesk Project")
    output_dir: Path = Field(default=Path("."))
    source: SourceConfig = Field(default_factory=SourceConfig)
    site: SiteConfig = Field(default_factory=SiteConfig)
    listing: ListingConfig = Field(default_factory=ListingConfig)
    feeds: FeedConfig = Field(default_factory=FeedConfig)

    @field_validator("output_dir", mode="before")
    def _ensure_path(cls, value: Any) -> Path:
        return Path(value)

    @property
    def listing_template_path(self) -> Path:
        template = self.listing.template
        return template if template.is_absolute() else self.output_dir / template

    @property
    def articles_dir(self) -> Path:
        return self.output_dir / self.site.articles_path


def load_config(path: str | Path) -> Config:
    """Load configuration and resolve relative paths based on the config location.

    The ``path`` argument may point to a file (e.g., ``/site/newsdesk.yml``) or a
    directory containing that file. A directory without a config file yields the
    defaults anchored to that directory.
    """
    candidate = Path(path)
    data: dict[str, Any] = {}
    if candidate.is_dir():
        config_file = candidate / CONFIG_FILENAME
        if config_file.exists():
            data = _read_yaml(config_file)
        base_dir = candidate.resolve()
    else:
        if not candidate.exists():
            raise FileNotFoundError(candidate)
        data = _read_yaml(candidate)
        base_dir = candidate.parent.resolve()

    cfg = Config(**data)
    if not cfg.output_dir.is_absolute():
        cfg.output_dir = (base_dir / cfg.output_dir).resolve()
    # listing.template stays relative; it is joined under output_dir.
    return cfg


def apply_environment(config: Config, environ: Mapping[str, str]) -> Config:
    """Overlay credentials and environment override from process variables.

    Values present in ``environ`` win over the ones read from the config file.
    """
    updates: dict[str, str] = {}
    for key, field_name in (
        (SPACE_ID_VAR, "space_id"),
        (ACCESS_TOKEN_VAR, "access_token"),
        (ENVIRONMENT_VAR, "environment"),
    ):
        value = (environ.get(key) or "").strip()
        if value:
            updates[field_name] = value
    if updates:
        config.source = config.source.model_copy(update=updates)
    return config


def _read_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must define a mapping.")
    return data
