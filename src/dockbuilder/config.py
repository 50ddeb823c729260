import yaml
import logging
from enum import Enum
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from . import constants
from .cache import PullCacheService
from .datacls import ArchiveSource, AuthParameters, BuildContext, BuildSource, GenerativeSource
from .exceptions import (
    ConfigFileMissingError,
    ConfigParsingError,
    ConfigValidationError,
)

logger = logging.getLogger(__name__)


def _stringify(values: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """YAML happily turns `1.0` or `true` into non-strings; build args are always strings."""
    if not values:
        return {}
    result = {}
    for key, value in values.items():
        if value is None:
            result[str(key)] = ""
        elif isinstance(value, bool):
            result[str(key)] = str(value).lower()
        else:
            result[str(key)] = str(value)
    return result


class CleanupMode(str, Enum):
    """What happens to the image a rebuild leaves dangling under its name."""
    NONE = "none"
    TRY_TO_REMOVE = "try"
    REMOVE = "remove"

    def is_removal_requested(self) -> bool:
        return self is not CleanupMode.NONE

    @classmethod
    def parse(cls, value: Union[str, bool, "CleanupMode", None]) -> "CleanupMode":
        if value is None:
            return cls.TRY_TO_REMOVE
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return cls.TRY_TO_REMOVE if value else cls.NONE
        norm = str(value).strip().lower()
        if norm == "true":
            return cls.TRY_TO_REMOVE
        if norm == "false":
            return cls.NONE
        for mode in cls:
            if mode.value == norm:
                return mode
        raise ConfigValidationError(
            f"Invalid cleanup mode '{value}', must be one of {[m.value for m in cls]} (or true/false)."
        )


class AssemblyConfiguration(BaseModel):
    """
        Class Config-Validation Model describe `build.assembly`
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = constants.DEFAULT_ASSEMBLY_NAME
    source_dir: Optional[str] = Field(None, alias='sourceDir')
    target_dir: Optional[str] = Field(None, alias='targetDir')
    descriptor: Optional[str] = None

    @property
    def effective_target_dir(self) -> str:
        return self.target_dir or f"/{self.name}"


class BuildImageConfiguration(BaseModel):
    """
        Class Config-Validation Model describe `build` of an image
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_image: Optional[str] = Field(None, alias='from')
    dockerfile: Optional[str] = Field(None, alias='dockerFile')
    docker_archive: Optional[str] = Field(None, alias='dockerArchive')
    context_dir: Optional[str] = Field(None, alias='contextDir')
    assembly: Optional[AssemblyConfiguration] = None
    nocache: bool = Field(False, alias='noCache')
    cleanup: CleanupMode = CleanupMode.TRY_TO_REMOVE
    args: Dict[str, str] = Field(default_factory=dict)
    build_options: Dict[str, str] = Field(default_factory=dict, alias='buildOptions')

    @field_validator('cleanup', mode='before')
    @classmethod
    def parse_cleanup(cls, value: Any) -> CleanupMode:
        return CleanupMode.parse(value)

    @field_validator('args', 'build_options', mode='before')
    @classmethod
    def stringify_values(cls, value: Any) -> Dict[str, str]:
        return _stringify(value)

    @model_validator(mode='after')
    def check_build_source(self) -> 'BuildImageConfiguration':
        """Archive loading excludes generative inputs; Dockerfile and assembly exclude each other."""
        if self.docker_archive:
            generative = {
                'from': self.from_image,
                'dockerFile': self.dockerfile,
                'contextDir': self.context_dir,
                'assembly': self.assembly,
                'args': self.args,
            }
            conflicting = [key for key, value in generative.items() if value]
            if conflicting:
                raise ConfigValidationError(
                    f"'dockerArchive' cannot be combined with {', '.join(repr(k) for k in conflicting)}."
                )
        if self.dockerfile and self.assembly:
            raise ConfigValidationError("'dockerFile' and 'assembly' are mutually exclusive.")
        return self

    @property
    def cleanup_mode(self) -> CleanupMode:
        return self.cleanup

    def is_dockerfile_mode(self) -> bool:
        return bool(self.dockerfile)

    def is_archive_mode(self) -> bool:
        return bool(self.docker_archive)

    @property
    def dockerfile_name(self) -> Optional[str]:
        return Path(self.dockerfile).name if self.dockerfile else None

    def absolute_context_dir(self, base_dir: Path) -> Path:
        """Context directory; defaults to the Dockerfile's directory in Dockerfile mode."""
        if self.context_dir:
            return _absolute(base_dir, self.context_dir)
        if self.dockerfile:
            return self.absolute_dockerfile_path(base_dir).parent
        return base_dir.absolute()

    def absolute_dockerfile_path(self, base_dir: Path) -> Path:
        if not self.dockerfile:
            raise ConfigValidationError("No 'dockerFile' configured.")
        root = _absolute(base_dir, self.context_dir) if self.context_dir else base_dir
        return _absolute(root, self.dockerfile)

    def absolute_archive_path(self, base_dir: Path) -> Path:
        if not self.docker_archive:
            raise ConfigValidationError("No 'dockerArchive' configured.")
        return _absolute(base_dir, self.docker_archive)

    def source(self, base_dir: Path) -> BuildSource:
        if self.docker_archive:
            return ArchiveSource(self.absolute_archive_path(base_dir))
        return GenerativeSource(self)


def _absolute(base_dir: Path, path: str) -> Path:
    p = Path(path)
    return p if p.is_absolute() else (base_dir / p).absolute()


class ImageConfiguration(BaseModel):
    """
        Class Config-Validation Model describe one entry of `images`
    """
    model_config = ConfigDict(frozen=True)

    name: str
    alias: Optional[str] = None
    build: BuildImageConfiguration = Field(default_factory=BuildImageConfiguration)

    @property
    def description(self) -> str:
        return f'[{self.name}] "{self.alias}"' if self.alias else f"[{self.name}]"


class RunConfigModel(BaseModel):
    """
        Class Config-Validation Model desribe top-level of a run file
    """
    model_config = ConfigDict(populate_by_name=True)

    registry: Optional[str] = None
    pull_registry: Optional[str] = Field(None, alias='pullRegistry')
    auto_pull: Optional[str] = Field(None, alias='autoPull')
    build_args: Dict[str, str] = Field(default_factory=dict, alias='buildArgs')
    properties: Dict[str, str] = Field(default_factory=dict)
    output_dir: str = Field(constants.DEFAULT_OUTPUT_DIR, alias='outputDir')
    auth: AuthParameters = Field(default_factory=AuthParameters)
    images: List[ImageConfiguration]

    @field_validator('auto_pull', mode='before')
    @classmethod
    def normalize_auto_pull(cls, value: Any) -> Optional[str]:
        # YAML 1.1 reads `on`/`off` as booleans
        if isinstance(value, bool):
            return "on" if value else "off"
        return value

    @field_validator('build_args', 'properties', mode='before')
    @classmethod
    def stringify_values(cls, value: Any) -> Dict[str, str]:
        return _stringify(value)

    @model_validator(mode='after')
    def check_unique_image_names(self) -> 'RunConfigModel':
        seen = set()
        duplicates = set()
        for image in self.images:
            if image.name in seen:
                duplicates.add(image.name)
            seen.add(image.name)
        if duplicates:
            raise ConfigValidationError(f"Duplicate image names found: {', '.join(sorted(duplicates))}")
        return self


class Config:
    """
    Loads and validates a run file (YAML) using Pydantic models.
    It is the sole gatekeeper for configuration.
    """
    def __init__(self, config_path: str):
        self.path = Path(config_path)
        logger.info(f"Loading configuration from '{self.path}'...")
        raw_data = self._load_raw_config()

        logger.info("Validating configuration structure with Pydantic...")
        try:
            self.model = RunConfigModel.model_validate(raw_data)
            logger.debug(f"Configuration model validated successfully: \n{self.model.model_dump_json(indent=2, exclude={'auth'})}")
            logger.info("Configuration validation passed.")
        except ValidationError as e:
            raise ConfigValidationError(f"Configuration validation failed:\n{e}")

    def _load_raw_config(self) -> Dict[str, Any]:
        try:
            content = self.path.read_text(encoding='utf-8')
            config_data = yaml.safe_load(content)
            if not isinstance(config_data, dict):
                raise ConfigParsingError("Configuration file must be a YAML document containing a dictionary.")
            logger.debug(f"Successfully parsed YAML from '{self.path}'.")
            return config_data
        except FileNotFoundError:
            raise ConfigFileMissingError(f"Configuration file not found at: {self.path}")
        except yaml.YAMLError as e:
            raise ConfigParsingError(f"Error parsing YAML file: {e}")

    @property
    def base_dir(self) -> Path:
        return self.path.parent.absolute()

    @property
    def images(self) -> List[ImageConfiguration]:
        return list(self.model.images)

    def image(self, name: str) -> ImageConfiguration:
        for image in self.model.images:
            if image.name == name or image.alias == name:
                return image
        raise ConfigValidationError(f"No image named '{name}' in {self.path}")

    def build_context(self, pull_cache: PullCacheService,
                      global_properties: Optional[Dict[str, str]] = None) -> BuildContext:
        return BuildContext(
            pull_cache=pull_cache,
            base_dir=self.base_dir,
            output_dir=Path(self.model.output_dir),
            build_args=self.model.build_args,
            project_properties=self.model.properties,
            global_properties=global_properties or {},
            pull_registry=self.model.pull_registry,
            registry=self.model.registry,
            auto_pull=self.model.auto_pull,
            auth=self.model.auth,
        )
