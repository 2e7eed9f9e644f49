"""Loading resource declarations from YAML files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from shipyard.config.context import EvalContext
from shipyard.core.errors import ConfigLoadError, ResourceExistsError, WANExistsError
from shipyard.core.registry import WAN_NAME, Config
from shipyard.core.schema import Blueprint, Resource, ResourceType, new_resource

logger = logging.getLogger(__name__)

BLUEPRINT_PATTERN = "*.yard"
RESOURCE_PATTERNS = ("*.yml", "*.yaml")


def ensure_absolute(path: str, file: str | Path) -> str:
    """
    Make a path absolute.

    Relative paths are taken relative to the directory of the file that
    declares them.
    """
    if Path(path).is_absolute():
        return path
    base_dir = Path(file).absolute().parent
    return str(base_dir / path)


def _read_yaml(file: Path) -> Any:
    try:
        with file.open() as f:
            return yaml.safe_load(f)
    except OSError as e:
        raise ConfigLoadError(f"Unable to read file: {e}", str(file)) from e
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML: {e}", str(file)) from e


class ConfigLoader:
    """
    Decodes YAML resource files into a :class:`Config`.

    A resource file maps type tags to named blocks::

        network:
          cloud:
            subnet: 10.5.0.0/16

        cluster:
          k3s:
            network: network.cloud
            depends_on: ["network.cloud"]

    String values may contain ``${env("NAME")}`` and ``${k8s_config("cluster")}``
    expressions, evaluated with the loader's :class:`EvalContext`.
    """

    def __init__(self, context: EvalContext | None = None) -> None:
        self.context = context or EvalContext()

    def load_folder(self, folder: str | Path, config: Config | None = None) -> Config:
        """
        Load the blueprint and every resource file in a folder.

        Files directly in the folder and one directory level below are
        read in sorted order. A new config holding the wan network is
        created when none is passed.
        """
        folder = Path(folder).absolute()
        if not folder.is_dir():
            raise ConfigLoadError(f"Config folder not found: {folder}")

        if config is None:
            config = Config.new()

        blueprints = sorted(folder.glob(BLUEPRINT_PATTERN))
        if blueprints:
            self.load_blueprint(blueprints[0], config)

        files: list[Path] = []
        for pattern in RESOURCE_PATTERNS:
            files.extend(folder.glob(pattern))
        top_level = sorted(files)
        nested = sorted(
            f for pattern in RESOURCE_PATTERNS for f in folder.glob(f"*/{pattern}")
        )

        for file in top_level + nested:
            self.load_file(file, config)

        logger.debug("Loaded %d resources from %s", len(config), folder)
        return config

    def load_blueprint(self, file: str | Path, config: Config) -> Blueprint:
        """Load a blueprint file and attach it to the config."""
        file = Path(file)
        data = self.context.evaluate(_read_yaml(file) or {})
        if not isinstance(data, dict):
            raise ConfigLoadError("Blueprint must be a mapping", str(file))

        try:
            blueprint = Blueprint(**data)
        except ValidationError as e:
            raise ConfigLoadError(f"Invalid blueprint: {e}", str(file)) from e

        config.blueprint = blueprint
        return blueprint

    def load_file(self, file: str | Path, config: Config) -> list[Resource]:
        """
        Decode every block in a resource file and register it.

        The file is loaded as a whole: every block is decoded and checked
        against the config before any of them is registered, so a failing
        file leaves the config unchanged.

        Raises:
            ConfigLoadError: if the file can not be read or a block is invalid
            UnknownResourceTypeError: for an unknown type tag
            WANExistsError: if the file declares a network named wan
            ResourceExistsError: if a block's address is already registered
        """
        file = Path(file).absolute()
        data = _read_yaml(file)
        if data is None:
            return []
        if not isinstance(data, dict):
            raise ConfigLoadError("Resource file must map types to named blocks", str(file))

        added: list[Resource] = []
        seen: set[str] = set()
        for type_tag, blocks in data.items():
            if not isinstance(blocks, dict):
                raise ConfigLoadError(f"'{type_tag}' must map names to blocks", str(file))
            for name, attributes in blocks.items():
                resource = self._decode_block(file, str(type_tag), str(name), attributes or {})
                if resource.address in config or resource.address in seen:
                    raise ResourceExistsError(resource.address)
                seen.add(resource.address)
                added.append(resource)

        for resource in added:
            config.add_resource(resource)

        logger.debug("Loaded %d resources from %s", len(added), file)
        return added

    def _decode_block(
        self, file: Path, type_tag: str, name: str, attributes: dict[str, Any]
    ) -> Resource:
        if type_tag == ResourceType.NETWORK.value and name == WAN_NAME:
            raise WANExistsError()
        if not isinstance(attributes, dict):
            raise ConfigLoadError(f"Block {type_tag}.{name} must be a mapping", str(file))

        attributes = {str(k): v for k, v in self.context.evaluate(attributes).items()}
        try:
            resource = new_resource(type_tag, name, **attributes)
        except ValidationError as e:
            raise ConfigLoadError(f"Invalid block {type_tag}.{name}: {e}", str(file)) from e
        except ConfigLoadError as e:
            raise ConfigLoadError(str(e), str(file)) from e

        self._normalize_paths(resource, file)
        return resource

    @staticmethod
    def _normalize_paths(resource: Resource, file: Path) -> None:
        """Make the path attributes and volume sources of a resource absolute."""
        for field in resource.path_fields:
            value = getattr(resource, field)
            if isinstance(value, list):
                setattr(resource, field, [ensure_absolute(p, file) for p in value])
            elif value:
                setattr(resource, field, ensure_absolute(value, file))

        for volume in getattr(resource, "volumes", []):
            volume.source = ensure_absolute(volume.source, file)


def load_folder(folder: str | Path, context: EvalContext | None = None) -> Config:
    """Load a config folder with a fresh loader."""
    return ConfigLoader(context).load_folder(folder)
