"""
Configuration Manager for memongo

Loads mongod launch settings from environment variables and environment
files, validates them, and builds ServerOptions.
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError

from memongo.models.server_options import ServerOptions

logger = logging.getLogger(__name__)


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


class ConfigManager:
    """
    Central configuration management for memongo.

    Provides:
    - mongod executable path from MEMONGO_MONGOD_BIN
    - Startup timeout, storage engine, port and naming settings
    - Environment file loading with precedence
    - Configuration validation
    """

    ENV_VARS = {
        'mongod_path': 'MEMONGO_MONGOD_BIN',
        'startup_timeout': 'MEMONGO_STARTUP_TIMEOUT',
        'storage_engine': 'MEMONGO_STORAGE_ENGINE',
        'port': 'MEMONGO_PORT',
        'db_name_length': 'MEMONGO_DB_NAME_LENGTH',
        'log_level': 'MEMONGO_LOG_LEVEL',
        'working_dir_root': 'MEMONGO_WORKING_DIR',
        'extra_args': 'MEMONGO_MONGOD_ARGS',
    }

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize ConfigManager.

        Args:
            config_dir: Directory containing environment files
        """
        self.config_dir = Path(config_dir) if config_dir else Path.cwd()
        self._env_vars: Dict[str, str] = {}
        self._load_env_files()

    def _load_env_files(self):
        """Load environment files with precedence: .env.<MEMONGO_ENV> > .env"""
        env = os.getenv('MEMONGO_ENV', 'test')

        env_files = ['.env', f'.env.{env}']
        for env_file in env_files:
            env_path = self.config_dir / env_file
            if env_path.exists():
                self._load_env_file(env_path)

    def _load_env_file(self, env_path: Path):
        """Load a single environment file into our internal env_vars dict."""
        try:
            with open(env_path, 'r') as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith('#') and '=' in line:
                        key, value = line.split('=', 1)
                        self._env_vars[key.strip()] = value.strip()
        except OSError as e:
            raise ConfigValidationError(f"Cannot read environment file {env_path}: {e}") from e
        logger.debug(f"Loaded environment file {env_path}")

    def get(self, env_var: str) -> Optional[str]:
        """Get a raw setting; os.environ takes precedence over env files."""
        return os.getenv(env_var) or self._env_vars.get(env_var)

    def _get_int(self, env_var: str) -> Optional[int]:
        value = self.get(env_var)
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            raise ConfigValidationError(f"Invalid {env_var}: '{value}' - must be an integer")

    def _get_float(self, env_var: str) -> Optional[float]:
        value = self.get(env_var)
        if value is None:
            return None
        try:
            return float(value)
        except ValueError:
            raise ConfigValidationError(f"Invalid {env_var}: '{value}' - must be a number")

    @property
    def mongod_path(self) -> Optional[str]:
        """Get the configured mongod executable path."""
        return self.get(self.ENV_VARS['mongod_path'])

    @property
    def startup_timeout(self) -> Optional[float]:
        """Get the startup timeout in seconds."""
        return self._get_float(self.ENV_VARS['startup_timeout'])

    @property
    def storage_engine(self) -> Optional[str]:
        """Get the mongod storage engine."""
        return self.get(self.ENV_VARS['storage_engine'])

    @property
    def port(self) -> Optional[int]:
        """Get the fixed mongod port."""
        return self._get_int(self.ENV_VARS['port'])

    @property
    def db_name_length(self) -> Optional[int]:
        """Get the generated database name length."""
        return self._get_int(self.ENV_VARS['db_name_length'])

    @property
    def log_level(self) -> Optional[str]:
        return self.get(self.ENV_VARS['log_level'])

    @property
    def working_dir_root(self) -> Optional[str]:
        return self.get(self.ENV_VARS['working_dir_root'])

    @property
    def extra_args(self) -> List[str]:
        """Get additional mongod arguments (whitespace separated)."""
        value = self.get(self.ENV_VARS['extra_args'])
        return value.split() if value else []

    def get_server_options(self, **overrides) -> ServerOptions:
        """
        Build validated ServerOptions from configuration.

        Args:
            **overrides: Explicit option values that win over configuration

        Raises:
            ConfigValidationError: If any value is invalid
        """
        values = {
            'mongod_path': self.mongod_path,
            'startup_timeout': self.startup_timeout,
            'storage_engine': self.storage_engine,
            'port': self.port,
            'db_name_length': self.db_name_length,
            'log_level': self.log_level,
            'working_dir_root': self.working_dir_root,
            'extra_args': self.extra_args,
        }
        values = {key: value for key, value in values.items() if value is not None}
        values.update(overrides)

        try:
            return ServerOptions(**values)
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid memongo configuration: {e}") from e
