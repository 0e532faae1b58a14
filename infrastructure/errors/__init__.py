"""
Infrastructure Error Layer

The closed fault catalog, the sentinel causes raised by collaborators and
the tables that translate faults into HTTP and gRPC statuses.
"""

from .definitions import (
    FaultKind,
    SentinelError,
    NoRowsError,
    UpdateNoEffectError,
    FailCloseSessionError,
    DriveNotExistError,
    FileNotExistError,
    FileUploadError,
    FailGenerateUUIDError,
    FileUpdateError,
    FileRemoveError,
    GetFileError,
    InitialFileClientError,
)
from .translation import (
    HTTP_STATUS_TABLE,
    GRPC_STATUS_TABLE,
    UNKNOWN_HTTP_STATUS,
    UNKNOWN_GRPC_STATUS,
    UNKNOWN_ERROR_MESSAGE,
    GRPCStatusError,
    grpc_code_name,
    wrap_message,
)
from .faults import (
    FAULT_TYPES,
    Fault,
    AuthenticateFault,
    DBAlreadyExistsFault,
    DBConnectionFault,
    DBDisconnectionFault,
    DBExecuteFault,
    DBRowNotFoundFault,
    DBUpdateNoEffectFault,
    ExecuteFault,
    GRPCConnectionFault,
    GRPCExecuteFault,
    InvalidArgumentFault,
    JSONMarshalFault,
    JSONUnmarshalFault,
    JWTExecuteFault,
    DataNotFoundFault,
    PermissionDenyFault,
    ServerExecuteFault,
    VariableFault,
    recover,
)

__all__ = [
    # Kinds
    'FaultKind',

    # Sentinel causes
    'SentinelError',
    'NoRowsError',
    'UpdateNoEffectError',
    'FailCloseSessionError',
    'DriveNotExistError',
    'FileNotExistError',
    'FileUploadError',
    'FailGenerateUUIDError',
    'FileUpdateError',
    'FileRemoveError',
    'GetFileError',
    'InitialFileClientError',

    # Translation
    'HTTP_STATUS_TABLE',
    'GRPC_STATUS_TABLE',
    'UNKNOWN_HTTP_STATUS',
    'UNKNOWN_GRPC_STATUS',
    'UNKNOWN_ERROR_MESSAGE',
    'GRPCStatusError',
    'grpc_code_name',
    'wrap_message',

    # Faults
    'FAULT_TYPES',
    'Fault',
    'AuthenticateFault',
    'DBAlreadyExistsFault',
    'DBConnectionFault',
    'DBDisconnectionFault',
    'DBExecuteFault',
    'DBRowNotFoundFault',
    'DBUpdateNoEffectFault',
    'ExecuteFault',
    'GRPCConnectionFault',
    'GRPCExecuteFault',
    'InvalidArgumentFault',
    'JSONMarshalFault',
    'JSONUnmarshalFault',
    'JWTExecuteFault',
    'DataNotFoundFault',
    'PermissionDenyFault',
    'ServerExecuteFault',
    'VariableFault',
    'recover',
]
