# -----------------------------------------------------------------------------
# /*
#  * Copyright (C) 2025 CodeStory
#  *
#  * This program is free software; you can redistribute it and/or modify
#  * it under the terms of the GNU General Public License as published by
#  * the Free Software Foundation; Version 2.
#  *
#  * This program is distributed in the hope that it will be useful,
#  * but WITHOUT ANY WARRANTY; without even the implied warranty of
#  * MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
#  * GNU General Public License for more details.
#  *
#  * You should have received a copy of the GNU General Public License
#  * along with this program; if not, you can contact us at support@codestory.build
#  */
# -----------------------------------------------------------------------------

import os
from pathlib import Path
from typing import NamedTuple

import tomllib
from loguru import logger
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from patchbundle.core.exceptions import ConfigurationError


class ConfigSource(NamedTuple):
    name: str
    values: dict


class ConfigLoader:
    """Builds a settings model from CLI args, TOML files and the environment."""

    @staticmethod
    def get_full_config(
        config_model: type[BaseModel],
        input_args: dict,
        local_config_path: Path,
        env_app_prefix: str,
        global_config_path: Path,
        custom_config_path: Path | None = None,
    ):
        """
        Resolve every field of `config_model`, highest priority first:
        input args, custom config file, local config file, environment,
        global config file. Field defaults fill whatever is left.

        Returns the model, the names of the sources that contributed, and
        whether any default was used.
        """
        sources = [ConfigSource("Input Args", input_args)]

        if custom_config_path is not None:
            if not custom_config_path.exists():
                raise ConfigurationError(
                    f"Custom config file not found: {custom_config_path}",
                    "Pass an existing TOML file to --custom-config",
                )
            sources.append(
                ConfigSource("Custom Config", ConfigLoader.load_toml(custom_config_path))
            )

        sources += [
            ConfigSource("Local Config", ConfigLoader.load_toml(local_config_path)),
            ConfigSource("Environment Variables", ConfigLoader.load_env(env_app_prefix)),
            ConfigSource("Global Config", ConfigLoader.load_toml(global_config_path)),
        ]

        for source in sources:
            logger.debug(f"{source.name}: keys={sorted(source.values)}")

        return ConfigLoader.build(config_model, sources)

    @staticmethod
    def load_toml(path: Path) -> dict:
        """A missing or unparsable file contributes nothing."""
        if not path.is_file():
            logger.debug(f"No config file at {path}")
            return {}

        try:
            return tomllib.loads(path.read_text(encoding="utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring config file {path}: {e}")
            return {}

    @staticmethod
    def load_env(app_prefix: str) -> dict:
        prefix = app_prefix.lower()
        return {
            name[len(prefix) :].lower(): value
            for name, value in os.environ.items()
            if name.lower().startswith(prefix)
        }

    @staticmethod
    def build(config_model: type[BaseModel], sources: list[ConfigSource]):
        values = {}
        contributors = []

        for field_name in config_model.model_fields:
            for source in sources:
                if field_name in source.values:
                    values[field_name] = source.values[field_name]
                    if source.name not in contributors:
                        contributors.append(source.name)
                    break

        try:
            model = config_model.model_validate(values)
        except PydanticValidationError as e:
            raise ConfigurationError("Invalid configuration", str(e)) from e

        used_defaults = len(values) < len(config_model.model_fields)
        source_order = [source.name for source in sources]
        contributors.sort(key=source_order.index)

        return model, contributors, used_defaults
