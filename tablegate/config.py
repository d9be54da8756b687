"""
This module handles server configuration.
"""

import copy
from functools import cached_property
from pathlib import Path
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from .media_type_registration import (
    SerializationRegistry,
    default_deserialization_registry,
    default_serialization_registry,
)
from .serialization import register_builtin_serializers
from .structures.core import ResourceFamily
from .type_aliases import EntryPointString
from .utils import parse, prepend_to_sys_path

ADMIN_ALIASES = {"memory": "tablegate.adapters.memory:InMemoryAdmin"}


class AdminSpec(BaseModel):
    admin_type: Annotated[EntryPointString, Field(alias="client")]
    args: Optional[dict[str, Any]] = None

    @model_validator(mode="after")
    def check_callable(self):
        if self.args and not callable(self.admin_type):
            raise ValueError(
                f"Admin client '{self.admin_type.__class__}' is not callable and cannot take args"
            )
        return self

    @cached_property
    def admin(self) -> Any:
        if callable(self.admin_type):
            return self.admin_type(**self.args or {})
        return self.admin_type

    @field_validator("admin_type", mode="before")
    @classmethod
    def admin_alias(cls, value: Any) -> Any:
        return ADMIN_ALIASES.get(value, value)


class Config(BaseModel):
    admin: AdminSpec
    # Override the encoder for a resource family and media type, as in
    # {"table": {"text/plain": "package.module:serialize_table"}}
    media_types: dict[ResourceFamily, dict[str, EntryPointString]] = {}
    allow_origins: Optional[list[str]] = None
    request_bytesize_limit: Optional[Annotated[int, Field(gt=0)]] = None
    uvicorn: dict[str, Any] = {}

    def serialization_registry(self) -> SerializationRegistry:
        register_builtin_serializers()
        base = copy.deepcopy(default_serialization_registry)
        for family, types in self.media_types.items():
            for typ, func in types.items():
                base.register(family, typ, func)
        return base


def parse_configs(src_file: Union[str, Path]) -> Config:
    src_file = Path(src_file)
    if src_file.is_dir():
        conf = {}
        for f in sorted(src_file.iterdir()):
            if f.is_file() and f.suffix in (".yml", ".yaml"):
                with open(f) as file:
                    new_config = parse(file)
                if common := new_config.keys() & conf.keys():
                    # These specific keys can be merged from separate files.
                    # This can be useful for config.d-style where different
                    # files are managed by different stages of configuration
                    # management.
                    mergeable_lists = {"allow_origins"}
                    for key in common.intersection(mergeable_lists):
                        conf[key].extend(new_config.pop(key))
                        common.remove(key)
                    if common:
                        raise ValueError(f"Duplicate configuration for {common} in {f}")
                conf.update(new_config)
    else:
        with open(src_file) as file:
            conf = parse(file)

    with prepend_to_sys_path(src_file if src_file.is_dir() else src_file.parent):
        return Config.model_validate(conf)


def construct_build_app_kwargs(config: Union[Config, dict], source_filepath=None):
    if not isinstance(config, Config):
        if source_filepath is None:
            config = Config.model_validate(config)
        else:
            source_filepath = Path(source_filepath)
            directory = (
                source_filepath if source_filepath.is_dir() else source_filepath.parent
            )
            with prepend_to_sys_path(directory):
                config = Config.model_validate(config)
    server_settings = dict(
        allow_origins=config.allow_origins,
        request_bytesize_limit=config.request_bytesize_limit,
    )
    return dict(
        admin=config.admin.admin,
        server_settings=server_settings,
        serialization_registry=config.serialization_registry(),
        deserialization_registry=default_deserialization_registry,
    )
