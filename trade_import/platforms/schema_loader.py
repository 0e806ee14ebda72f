# trade_import/platforms/schema_loader.py
"""
Loads additional platform schemas from YAML.

Expected layout:

    platforms:
      - id: my-broker
        name: My Broker
        requiresDate: false
        groupExecutions: true
        transformSet: prop-reports   # reuse registered value parsing
        columns:
          symbol: [Symbol, Ticker]
          side: Action
          ...
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError as PydanticValidationError

from trade_import.domain.errors import SchemaDefinitionError
import trade_import.config as config
from .schema_models import PlatformSchema
from .registry import register_platform

logger = logging.getLogger(__name__)


def parse_platform_schemas(document: Any, source: str = "<yaml>") -> List[PlatformSchema]:
    if not isinstance(document, dict) or not isinstance(document.get('platforms'), list):
        raise SchemaDefinitionError(f"{source}: expected a top-level 'platforms' list")

    schemas: List[PlatformSchema] = []
    for i, entry in enumerate(document['platforms']):
        if not isinstance(entry, dict):
            raise SchemaDefinitionError(f"{source}: platform entry {i} is not a mapping")
        try:
            schemas.append(PlatformSchema.model_validate(entry))
        except PydanticValidationError as e:
            raise SchemaDefinitionError(f"{source}: invalid platform entry {i} ({entry.get('id', '?')}): {e.errors()}") from e
    return schemas


def load_platform_schemas(file_path: str) -> List[PlatformSchema]:
    path = Path(file_path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            document: Dict[str, Any] = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise SchemaDefinitionError(f"Platform schema file not found: {file_path}") from e
    except yaml.YAMLError as e:
        raise SchemaDefinitionError(f"Platform schema file {file_path} is not valid YAML: {e}") from e
    return parse_platform_schemas(document, source=str(path))


def register_custom_platforms(file_path: Optional[str] = None, replace: bool = False) -> List[PlatformSchema]:
    """Loads and registers schemas from `file_path` (or the configured file). Returns what was registered."""
    file_path = file_path or config.CUSTOM_PLATFORM_SCHEMAS_FILE_PATH
    if not file_path:
        return []

    registered = [register_platform(schema, replace=replace) for schema in load_platform_schemas(file_path)]
    logger.info(f"Registered {len(registered)} custom platform schema(s) from {file_path}")
    return registered
