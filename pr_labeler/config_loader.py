"""Parsing of per-repository labeler configuration files."""

import yaml
from pydantic import ValidationError

from .exceptions import ConfigurationError
from .models import SUPPORTED_CONFIG_VERSION, LabelerConfig


def parse_labeler_config(text: str | bytes) -> LabelerConfig:
    """Parse a YAML (or JSON) labeler configuration document.

    Example document::

        version: 1
        labels:
          - label: "WIP"
            title: "^WIP:.*"
          - label: "S"
            size-below: 10

    Args:
    ----
        text: Raw file contents

    Returns:
    -------
        The validated configuration

    Raises:
    ------
        ConfigurationError: If the document is malformed or its version unsupported

    """
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        msg = f"Labeler config is not valid YAML: {e}"
        raise ConfigurationError(msg) from e

    if not isinstance(document, dict):
        msg = "Labeler config must be a mapping with 'version' and 'labels' keys"
        raise ConfigurationError(msg)

    try:
        config = LabelerConfig.model_validate(document)
    except ValidationError as e:
        msg = f"Invalid labeler config: {e}"
        raise ConfigurationError(msg) from e

    if config.version != SUPPORTED_CONFIG_VERSION:
        msg = f"Unsupported labeler config version: {document.get('version')!r}"
        raise ConfigurationError(msg)

    return config
