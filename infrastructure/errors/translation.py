"""
Fault Translation Tables

Static mappings from fault kinds to the HTTP status code and the gRPC status
code a recovery boundary answers with, plus the gRPC status value itself.
"""

from typing import Dict

import grpc

from .definitions import FaultKind


HTTP_STATUS_TABLE: Dict[FaultKind, int] = {
    FaultKind.AUTHENTICATE: 401,
    FaultKind.DB_ALREADY_EXISTS: 409,
    FaultKind.DB_CONNECTION: 503,
    FaultKind.DB_DISCONNECTION: 503,
    FaultKind.DB_EXECUTE: 500,
    FaultKind.DB_ROW_NOT_FOUND: 404,
    FaultKind.DB_UPDATE_NO_EFFECT: 409,
    FaultKind.EXECUTE: 500,
    FaultKind.GRPC_CONNECTION: 503,
    FaultKind.GRPC_EXECUTE: 422,
    FaultKind.INVALID_ARGUMENT: 400,
    FaultKind.JSON_MARSHAL: 500,
    FaultKind.JSON_UNMARSHAL: 400,
    FaultKind.JWT_EXECUTE: 403,
    FaultKind.DATA_NOT_FOUND: 404,
    FaultKind.PERMISSION_DENY: 403,
    FaultKind.SERVER_EXECUTE: 500,
    FaultKind.VARIABLE: 400,
}

GRPC_STATUS_TABLE: Dict[FaultKind, grpc.StatusCode] = {
    FaultKind.AUTHENTICATE: grpc.StatusCode.UNAUTHENTICATED,
    FaultKind.DB_ALREADY_EXISTS: grpc.StatusCode.ALREADY_EXISTS,
    FaultKind.DB_CONNECTION: grpc.StatusCode.UNAVAILABLE,
    FaultKind.DB_DISCONNECTION: grpc.StatusCode.UNAVAILABLE,
    FaultKind.DB_EXECUTE: grpc.StatusCode.INTERNAL,
    FaultKind.DB_ROW_NOT_FOUND: grpc.StatusCode.NOT_FOUND,
    FaultKind.DB_UPDATE_NO_EFFECT: grpc.StatusCode.ABORTED,
    FaultKind.EXECUTE: grpc.StatusCode.INTERNAL,
    FaultKind.GRPC_CONNECTION: grpc.StatusCode.UNAVAILABLE,
    FaultKind.GRPC_EXECUTE: grpc.StatusCode.FAILED_PRECONDITION,
    FaultKind.INVALID_ARGUMENT: grpc.StatusCode.INVALID_ARGUMENT,
    FaultKind.JSON_MARSHAL: grpc.StatusCode.INTERNAL,
    FaultKind.JSON_UNMARSHAL: grpc.StatusCode.INVALID_ARGUMENT,
    FaultKind.JWT_EXECUTE: grpc.StatusCode.PERMISSION_DENIED,
    FaultKind.DATA_NOT_FOUND: grpc.StatusCode.NOT_FOUND,
    FaultKind.PERMISSION_DENY: grpc.StatusCode.PERMISSION_DENIED,
    FaultKind.SERVER_EXECUTE: grpc.StatusCode.INTERNAL,
    FaultKind.VARIABLE: grpc.StatusCode.INVALID_ARGUMENT,
}

# Outcome for anything that is not a member of the fault catalog
UNKNOWN_HTTP_STATUS = 500
UNKNOWN_GRPC_STATUS = grpc.StatusCode.INTERNAL
UNKNOWN_ERROR_MESSAGE = "internal server error"


def grpc_code_name(code: grpc.StatusCode) -> str:
    """Canonical CamelCase name of a gRPC code, e.g. ``FailedPrecondition``."""
    return "".join(part.capitalize() for part in code.name.split("_"))


def wrap_message(prefix: str, error: object) -> str:
    """Prefix an error message the way gRPC details are written."""
    if not prefix:
        return str(error)
    return f"{prefix}: {error}"


class GRPCStatusError(Exception):
    """A gRPC status carried as an error value."""

    def __init__(self, code: grpc.StatusCode, details: str):
        self.code = code
        self.details = details
        super().__init__(details)

    @property
    def code_name(self) -> str:
        return grpc_code_name(self.code)

    def apply(self, context: grpc.ServicerContext) -> None:
        """Write this status onto a servicer context."""
        context.set_code(self.code)
        context.set_details(self.details)

    def __str__(self) -> str:
        return f"rpc error: code = {self.code_name} desc = {self.details}"

    def __repr__(self) -> str:
        return f"GRPCStatusError(code={self.code!r}, details={self.details!r})"
