"""Shared fixtures: built-in registries and an aggregator over them."""

import pytest

from sdtt.config.settings import RegistryConfig
from sdtt.engine.aggregator import Aggregator
from sdtt.registry.builtin import load_registries


@pytest.fixture
def registries():
    return load_registries(RegistryConfig(schemas_path=None, presets_path=None))


@pytest.fixture
def aggregator(registries):
    return Aggregator(registries)
