"""Built-in schema and preset tables, and registry loading."""

from __future__ import annotations

from dataclasses import dataclass

from sdtt.config.settings import RegistryConfig
from sdtt.registry.presets import Preset, PresetRegistry
from sdtt.registry.schemas import ExpectedType, FieldSpec, SchemaDefinition, SchemaRegistry

STRING = ExpectedType.STRING
URL = ExpectedType.URL
IMAGE = ExpectedType.IMAGE
DATE = ExpectedType.DATE
NUMBER = ExpectedType.NUMBER


def _req(key: str, expected_type: ExpectedType | None = None) -> FieldSpec:
    return FieldSpec(key=key, required=True, expected_type=expected_type)


def _opt(key: str, expected_type: ExpectedType | None = None) -> FieldSpec:
    return FieldSpec(key=key, required=False, expected_type=expected_type)


# schema.org types, tested identically in every typed serialization.
SCHEMA_ORG_TYPES: dict[str, tuple[FieldSpec, ...]] = {
    "Article": (
        _req("headline", STRING),
        _req("image", IMAGE),
        _opt("datePublished", DATE),
        _opt("dateModified", DATE),
        _opt("author", STRING),
        _opt("publisher", STRING),
        _opt("description", STRING),
    ),
    "NewsArticle": (
        _req("headline", STRING),
        _req("image", IMAGE),
        _req("datePublished", DATE),
        _opt("dateModified", DATE),
        _opt("author", STRING),
        _opt("publisher", STRING),
    ),
    "BlogPosting": (
        _req("headline", STRING),
        _req("image", IMAGE),
        _opt("datePublished", DATE),
        _opt("author", STRING),
    ),
    "Organization": (
        _req("name", STRING),
        _req("url", URL),
        _opt("logo", IMAGE),
        _opt("sameAs", URL),
        _opt("telephone", STRING),
    ),
    "Person": (
        _req("name", STRING),
        _opt("url", URL),
        _opt("image", IMAGE),
        _opt("jobTitle", STRING),
    ),
    "Product": (
        _req("name", STRING),
        _req("image", IMAGE),
        _opt("description", STRING),
        _opt("sku", STRING),
        _opt("brand", STRING),
        _opt("offers.price", NUMBER),
        _opt("offers.priceCurrency", STRING),
    ),
    "Event": (
        _req("name", STRING),
        _req("startDate", DATE),
        _req("location", STRING),
        _opt("endDate", DATE),
        _opt("image", IMAGE),
        _opt("description", STRING),
    ),
    "WebSite": (
        _req("name", STRING),
        _req("url", URL),
        _opt("potentialAction"),
    ),
    "BreadcrumbList": (_req("itemListElement"),),
    "LocalBusiness": (
        _req("name", STRING),
        _req("address"),
        _opt("telephone", STRING),
        _opt("image", IMAGE),
        _opt("url", URL),
    ),
    "Recipe": (
        _req("name", STRING),
        _req("image", IMAGE),
        _opt("recipeIngredient"),
        _opt("author", STRING),
        _opt("datePublished", DATE),
    ),
    "FAQPage": (_req("mainEntity"),),
}

OPEN_GRAPH_SCHEMAS: dict[str, tuple[FieldSpec, ...]] = {
    "Article": (
        _req("title", STRING),
        _req("type", STRING),
        _req("image", IMAGE),
        _req("url", URL),
        _opt("description", STRING),
        _opt("site_name", STRING),
    ),
    "Website": (
        _req("title", STRING),
        _req("type", STRING),
        _req("url", URL),
        _opt("description", STRING),
        _opt("image", IMAGE),
    ),
}

TWITTER_SCHEMAS: dict[str, tuple[FieldSpec, ...]] = {
    "Card": (
        _req("card", STRING),
        _req("title", STRING),
        _opt("description", STRING),
        _opt("image", IMAGE),
        _opt("site", STRING),
        _opt("creator", STRING),
    ),
}

METATAG_SCHEMAS: dict[str, tuple[FieldSpec, ...]] = {
    "Page": (
        _req("title", STRING),
        _req("description", STRING),
        _opt("canonical", URL),
        _opt("viewport", STRING),
    ),
}


def builtin_schemas() -> list[SchemaDefinition]:
    definitions: list[SchemaDefinition] = []
    for fmt in ("jsonld", "microdata", "rdfa"):
        definitions.extend(
            SchemaDefinition(format=fmt, name=name, fields=fields)
            for name, fields in SCHEMA_ORG_TYPES.items()
        )
    for fmt, table in (
        ("og", OPEN_GRAPH_SCHEMAS),
        ("twitter", TWITTER_SCHEMAS),
        ("metatags", METATAG_SCHEMAS),
    ):
        definitions.extend(
            SchemaDefinition(format=fmt, name=name, fields=fields) for name, fields in table.items()
        )
    return definitions


def builtin_presets() -> list[Preset]:
    return [
        Preset(
            name="Twitter",
            schemas=("twitter:Card",),
            description="Twitter card metatags",
        ),
        Preset(
            name="Facebook",
            schemas=("og:Article",),
            description="Open Graph metatags used by Facebook",
        ),
        Preset(
            name="SocialMedia",
            schemas=("og:Article", "twitter:Card"),
            description="Metatags used by social media sites",
        ),
        Preset(
            name="Google",
            schemas=("jsonld:WebSite", "jsonld:Organization", "jsonld:BreadcrumbList"),
            description="JSON-LD markup inspected by Google",
        ),
        Preset(
            name="SEO",
            schemas=("metatags:Page", "og:Website", "twitter:Card"),
            description="Basic page metadata",
        ),
    ]


@dataclass(frozen=True)
class Registries:
    """Schema and preset registries built once and passed around explicitly."""

    schemas: SchemaRegistry
    presets: PresetRegistry


def load_registries(config: RegistryConfig | None = None) -> Registries:
    """Build the registries from the configured JSON files or the built-in tables."""
    config = config or RegistryConfig()
    if config.schemas_path is not None:
        schemas = SchemaRegistry.from_file(config.schemas_path)
    else:
        schemas = SchemaRegistry(builtin_schemas())
    if config.presets_path is not None:
        presets = PresetRegistry.from_file(config.presets_path, schemas)
    else:
        presets = PresetRegistry(builtin_presets(), schemas)
    return Registries(schemas=schemas, presets=presets)
