"""
Test suite for memongo configuration management.

Settings come from environment variables first, then from environment files
in the configuration directory.
"""

import os
from unittest.mock import patch

import pytest

from memongo.config.config_manager import ConfigManager, ConfigValidationError
from memongo.models.server_options import ServerOptions


class TestDefaults:
    """Test configuration with nothing set"""

    def test_defaults_without_environment(self, tmp_path):
        with patch.dict(os.environ, {}, clear=True):
            options = ConfigManager(config_dir=str(tmp_path)).get_server_options()

        assert options.mongod_path is None
        assert options.port == 0
        assert options.storage_engine == "ephemeralForTest"
        assert options.startup_timeout == 10.0
        assert options.db_name_length == 15
        assert options.host == "localhost"
        assert options.extra_args == []
        assert options.log_level is None


class TestEnvironmentVariables:
    """Test settings from os.environ"""

    def test_all_settings_from_env(self, tmp_path):
        env_vars = {
            'MEMONGO_MONGOD_BIN': '/opt/mongodb/bin/mongod',
            'MEMONGO_STARTUP_TIMEOUT': '2.5',
            'MEMONGO_STORAGE_ENGINE': 'inMemory',
            'MEMONGO_PORT': '27999',
            'MEMONGO_DB_NAME_LENGTH': '20',
            'MEMONGO_LOG_LEVEL': 'debug',
            'MEMONGO_WORKING_DIR': '/var/tmp/memongo',
            'MEMONGO_MONGOD_ARGS': '--bind_ip 127.0.0.1 --nounixsocket',
        }

        with patch.dict(os.environ, env_vars, clear=True):
            options = ConfigManager(config_dir=str(tmp_path)).get_server_options()

        assert options.mongod_path == '/opt/mongodb/bin/mongod'
        assert options.startup_timeout == 2.5
        assert options.storage_engine == 'inMemory'
        assert options.port == 27999
        assert options.db_name_length == 20
        assert options.log_level == 'DEBUG'
        assert options.working_dir_root == '/var/tmp/memongo'
        assert options.extra_args == ['--bind_ip', '127.0.0.1', '--nounixsocket']

    def test_overrides_win_over_environment(self, tmp_path):
        with patch.dict(os.environ, {'MEMONGO_PORT': '27999'}, clear=True):
            options = ConfigManager(config_dir=str(tmp_path)).get_server_options(port=28000)

        assert options.port == 28000

    @pytest.mark.parametrize("env_var,value", [
        ('MEMONGO_PORT', 'not-a-port'),
        ('MEMONGO_PORT', '70000'),
        ('MEMONGO_STARTUP_TIMEOUT', 'soon'),
        ('MEMONGO_STARTUP_TIMEOUT', '0'),
        ('MEMONGO_DB_NAME_LENGTH', '-1'),
        ('MEMONGO_LOG_LEVEL', 'LOUD'),
    ])
    def test_invalid_values_raise_validation_error(self, tmp_path, env_var, value):
        with patch.dict(os.environ, {env_var: value}, clear=True):
            with pytest.raises(ConfigValidationError):
                ConfigManager(config_dir=str(tmp_path)).get_server_options()


class TestEnvironmentFiles:
    """Test environment file loading and precedence"""

    def test_settings_from_env_file(self, tmp_path):
        (tmp_path / '.env').write_text(
            "# memongo settings\n"
            "MEMONGO_MONGOD_BIN=/from/file/mongod\n"
            "MEMONGO_DB_NAME_LENGTH = 8\n"
        )

        with patch.dict(os.environ, {}, clear=True):
            options = ConfigManager(config_dir=str(tmp_path)).get_server_options()

        assert options.mongod_path == '/from/file/mongod'
        assert options.db_name_length == 8

    def test_environment_specific_file_overrides_base_file(self, tmp_path):
        (tmp_path / '.env').write_text("MEMONGO_PORT=27001\n")
        (tmp_path / '.env.ci').write_text("MEMONGO_PORT=27002\n")

        with patch.dict(os.environ, {'MEMONGO_ENV': 'ci'}, clear=True):
            config = ConfigManager(config_dir=str(tmp_path))
            assert config.port == 27002

    def test_os_environ_overrides_files(self, tmp_path):
        (tmp_path / '.env').write_text("MEMONGO_PORT=27001\n")

        with patch.dict(os.environ, {'MEMONGO_PORT': '27555'}, clear=True):
            config = ConfigManager(config_dir=str(tmp_path))
            assert config.port == 27555


class TestServerOptions:
    """Test the options model directly"""

    def test_log_level_is_normalised(self):
        assert ServerOptions(log_level="warning").log_level == "WARNING"

    def test_empty_storage_engine_is_rejected(self):
        with pytest.raises(ValueError):
            ServerOptions(storage_engine="")
