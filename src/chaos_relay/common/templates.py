"""Packaged prompt and generation config loaders."""
from __future__ import annotations
from importlib import resources
from typing import Any

import yaml

_RESOURCES = "chaos_relay.resources"

def load_template(name: str = "chaos_persona.txt") -> str:
    """
    Load a prompt template shipped with the package.

    Args:
        name: File name under the package resources.
    """
    return resources.files(_RESOURCES).joinpath(name).read_text(encoding="utf-8")

def load_generation_config(name: str = "generation.yaml") -> dict[str, Any]:
    """
    Load the generation parameters file shipped with the package.

    Args:
        name: YAML file name under the package resources.

    Returns:
        Parsed mapping (model, temperature, max_tokens, fallback_reply, system_prompt_template).
    """
    text = resources.files(_RESOURCES).joinpath(name).read_text(encoding="utf-8")
    return yaml.safe_load(text) or {}
