# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Loads the installer configuration from YAML into a StageContext.
"""
import logging
import os
from typing import Any, Dict, Optional

import yaml
from dotenv import dotenv_values
from pydantic import ValidationError

from ..MODELS.errors import ConfigError
from ..MODELS.stage_context import StageContext
from ..UTILS.string_interpolation import EnvironmentInterpolator

logger = logging.getLogger(__name__)


class ContextParser:
    """
    Parser for installer configuration files.

    A configuration file is a flat YAML mapping whose keys are StageContext
    fields. ${VAR} placeholders are substituted before the YAML is parsed.
    """
    def __init__(self, context: Optional[Dict[str, str]] = None, env_file: Optional[str] = None):
        """
        Initializes the parser.

        :param context: Variables for interpolation; defaults to the process environment.
        :param env_file: Optional .env file whose values override the context.
        """
        self.context = dict(os.environ) if context is None else dict(context)
        if env_file:
            if not os.path.exists(env_file):
                raise ConfigError(f"env file {env_file} not found")
            values = dotenv_values(env_file)
            self.context.update({k: v for k, v in values.items() if v is not None})

    def parse(self, config_path: str, overrides: Optional[Dict[str, Any]] = None) -> StageContext:
        """
        Parses a configuration file.

        :param config_path: Path to the YAML file.
        :param overrides: Values taking precedence over the file.
        :return: The resolved context.
        """
        try:
            with open(config_path, 'r') as f:
                content = f.read()
        except OSError as e:
            raise ConfigError(f"cannot read config {config_path}: {e}") from e
        logger.debug("Loaded configuration from %s", config_path)
        return self.parse_from_string(content, overrides)

    def parse_from_string(self, content: str, overrides: Optional[Dict[str, Any]] = None) -> StageContext:
        try:
            content = EnvironmentInterpolator.interpolate(content, self.context)
        except KeyError as e:
            raise ConfigError(f"interpolation failed: {e.args[0]}") from e

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("configuration must be a mapping")
        return self.parse_from_dict(data, overrides)

    def parse_from_dict(self, data: Dict[str, Any], overrides: Optional[Dict[str, Any]] = None) -> StageContext:
        """
        Validates a mapping into a StageContext.

        :param data: Field values.
        :param overrides: Values taking precedence; None entries are ignored.
        :return: The resolved context.
        :raises ConfigError: If validation fails.
        """
        merged = dict(data)
        merged.update({k: v for k, v in (overrides or {}).items() if v is not None})
        try:
            return StageContext.model_validate(merged)
        except ValidationError as e:
            raise ConfigError(f"invalid configuration: {e}") from e
