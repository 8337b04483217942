"""
Preset deploy templates loaded from templates.json at startup
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from launcher.actions import CUSTOM_ID
from launcher.errors import ConfigError
from launcher.models.deployment import Target

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Template:
    id: str
    name: str
    description: str
    params: Mapping[str, Any]

    def describe_params(self):
        return [f"{key}: {value}" for key, value in self.params.items()]


class TemplateCatalog:
    """Read-only templates grouped by target"""

    def __init__(self, templates: Dict[Target, Tuple[Template, ...]]):
        self._templates = {target: tuple(templates.get(target, ())) for target in Target}

    def list(self, target: Target) -> Tuple[Template, ...]:
        return self._templates[target]

    def get(self, target: Target, template_id: str) -> Optional[Template]:
        for template in self._templates[target]:
            if template.id == template_id:
                return template
        return None

    @classmethod
    def from_dict(cls, document: Any) -> "TemplateCatalog":
        if not isinstance(document, dict):
            raise ConfigError("Template file must contain a JSON object")

        templates = {}
        for target in Target:
            items = document.get(target.value, [])
            if not isinstance(items, list):
                raise ConfigError(f"'{target.value}' templates must be a list")
            templates[target] = tuple(_parse_template(target, item, index) for index, item in enumerate(items))
        return cls(templates)


def _parse_template(target: Target, item: Any, index: int) -> Template:
    where = f"{target.value}[{index}]"
    if not isinstance(item, dict):
        raise ConfigError(f"Template {where} must be an object")

    template_id = str(item.get("id", "")).strip()
    if not template_id:
        raise ConfigError(f"Template {where} has no id")
    if template_id == CUSTOM_ID:
        raise ConfigError(f"Template {where} uses the reserved id '{CUSTOM_ID}'")

    params = item.get("params") or {}
    if not isinstance(params, dict):
        raise ConfigError(f"Template {where} params must be an object")

    return Template(
        id=template_id,
        name=str(item.get("name") or template_id),
        description=str(item.get("description") or ""),
        params=MappingProxyType(dict(params)),
    )


def load_templates(path: Union[str, Path]) -> TemplateCatalog:
    """Load and check templates.json; any problem is a ConfigError"""
    path = Path(path)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigError(f"Template file not found: {path}")
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read template file {path}: {e}")

    catalog = TemplateCatalog.from_dict(document)
    logger.info(
        f"Loaded {len(catalog.list(Target.METAPLEX))} Metaplex and "
        f"{len(catalog.list(Target.EVM))} EVM templates from {path}"
    )
    return catalog
