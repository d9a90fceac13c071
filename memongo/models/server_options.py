"""
ServerOptions model for configuring throwaway mongod instances.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, confloat, conint, constr, field_validator

from memongo.naming.name_generator import DEFAULT_DB_NAME_LENGTH
from memongo.runtime.mongod_launcher import DEFAULT_STORAGE_ENGINE

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ServerOptions(BaseModel):
    """
    Options for a MongoServer.

    Attributes:
        mongod_path: Path to the mongod executable (None: resolve at start)
        port: Port to request from mongod (0: allocate a free one)
        storage_engine: Value for mongod's --storageEngine flag
        startup_timeout: Seconds to wait for mongod to report readiness
        db_name_length: Length of generated database names
        host: Host used in the connection URI and for port allocation
        working_dir_root: Parent directory for data directories (None: system temp)
        extra_args: Additional mongod command line arguments
        connect_timeout_ms: Client server-selection timeout in milliseconds
        log_level: Level applied to the memongo logger, if set
    """

    mongod_path: Optional[str] = Field(None, description="Path to the mongod executable")
    port: conint(ge=0, le=65535) = Field(0, description="Requested port, 0 to allocate")
    storage_engine: constr(min_length=1) = Field(DEFAULT_STORAGE_ENGINE, description="mongod storage engine")
    startup_timeout: confloat(gt=0) = Field(10.0, description="Readiness deadline in seconds")
    db_name_length: conint(ge=0) = Field(DEFAULT_DB_NAME_LENGTH, description="Generated database name length")
    host: constr(min_length=1) = Field("localhost", description="Host used in the connection URI and for port allocation")
    working_dir_root: Optional[str] = Field(None, description="Parent directory for data directories")
    extra_args: List[str] = Field(default_factory=list, description="Additional mongod arguments")
    connect_timeout_ms: conint(gt=0) = Field(5000, description="Client server-selection timeout")
    log_level: Optional[str] = Field(None, description="memongo logger level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        level = value.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {value}")
        return level
