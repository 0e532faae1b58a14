"""
Fault Definitions

This module defines the closed set of fault kinds and the sentinel causes
used by collaborators before a failure is wrapped into a fault.
"""

from enum import Enum
from typing import Optional


class FaultKind(str, Enum):
    """Stable fault identifiers, used for log correlation and client matching."""
    AUTHENTICATE = "errAuthenticate"
    DB_ALREADY_EXISTS = "errDBAlreadyExists"
    DB_CONNECTION = "errDBConnection"
    DB_DISCONNECTION = "errDBDisConnection"
    DB_EXECUTE = "errDBExecute"
    DB_ROW_NOT_FOUND = "errDBRowNotFound"
    DB_UPDATE_NO_EFFECT = "errDBUpdateNoEffect"
    EXECUTE = "errExecute"
    GRPC_CONNECTION = "errGRPCConnection"
    GRPC_EXECUTE = "errGRPCExecute"
    INVALID_ARGUMENT = "errProcessInvalidArgument"
    JSON_MARSHAL = "errJSONMarshal"
    JSON_UNMARSHAL = "errJSONUnmarshal"
    JWT_EXECUTE = "errJWTExecute"
    DATA_NOT_FOUND = "errDataNotFound"
    PERMISSION_DENY = "errPermissionDeny"
    SERVER_EXECUTE = "errServerExecute"
    VARIABLE = "errVariable"

    def __str__(self) -> str:
        return self.value


class SentinelError(Exception):
    """
    Base class for plain causes raised by collaborators.

    Sentinel causes carry no transport mapping; they are compared by type
    and must be wrapped into a fault before crossing a recovery boundary.
    """

    base_message = "sentinel error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        message = self.base_message
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class NoRowsError(SentinelError):
    base_message = "no rows in result set"


class UpdateNoEffectError(SentinelError):
    base_message = "no rows effected"


class FailCloseSessionError(SentinelError):
    base_message = "fail to close connection"


class DriveNotExistError(SentinelError):
    base_message = "file drive not exist"


class FileNotExistError(SentinelError):
    base_message = "file not exist"


class FileUploadError(SentinelError):
    base_message = "fail to upload file"


class FailGenerateUUIDError(FileUploadError):
    """Upload failure caused by the object name generator."""
    base_message = "fail to upload file: fail to generate uuid"


class FileUpdateError(SentinelError):
    base_message = "fail to update file"


class FileRemoveError(SentinelError):
    base_message = "fail to remove file"


class GetFileError(SentinelError):
    base_message = "fail to get file"


class InitialFileClientError(SentinelError):
    base_message = "fail to initial file client"
