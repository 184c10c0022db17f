"""Load alternative mapping tables from JSON files."""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from ifirma_client.exceptions import ConfigurationError
from ifirma_client.transformer.registry import EnumRule, TransformerRegistry, default_registry

from .mapping import FieldMap, ValueMap

logger = logging.getLogger(__name__)


def parse_value_map(
    table: Mapping[str, Any],
    registry: Optional[TransformerRegistry] = None,
) -> ValueMap:
    """
    Build a ValueMap from its JSON representation

    Each entry is one of:
        {"transform": "FORMAT_DATE"}   named transformer
        {"enum": {"net": "NET"}}       enumerated table
        {...}                          nested value map for a composite
    """
    registry = registry or default_registry
    children: Dict[str, Any] = {}

    for key, node in table.items():
        if not isinstance(node, Mapping):
            raise ConfigurationError(f"Invalid value rule for '{key}': {node!r}")

        if "transform" in node:
            try:
                children[key] = registry.get(node["transform"])
            except KeyError as e:
                raise ConfigurationError(str(e.args[0])) from e
        elif "enum" in node:
            children[key] = EnumRule(node["enum"])
        else:
            children[key] = parse_value_map(node, registry)

    return ValueMap(children)


def load_mapping_tables(
    path: Union[str, Path],
    registry: Optional[TransformerRegistry] = None,
) -> Tuple[FieldMap, ValueMap]:
    """
    Load a field map and value map from a JSON file

    File layout:
        {
            "fields": {"issue_date": "DataWystawienia",
                       "items": {"items": "Pozycje", "name": "NazwaPelna"}},
            "values": {"issue_date": {"transform": "FORMAT_DATE"}}
        }

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read mapping file {path}: {e}") from e

    if "fields" not in data:
        raise ConfigurationError(f"Mapping file {path} has no 'fields' section")

    try:
        field_map = FieldMap.from_legacy(data["fields"])
    except ValueError as e:
        raise ConfigurationError(f"Invalid field mapping in {path}: {e}") from e

    value_map = parse_value_map(data.get("values", {}), registry)

    logger.info(f"Loaded mapping tables from {path} ({len(field_map.children)} fields)")
    return field_map, value_map
