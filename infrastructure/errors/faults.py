"""
Fault Values

Each fault kind has exactly one concrete ``Fault`` subclass. A fault wraps
the underlying cause, carries an optional system label and knows how to
report itself and how to translate itself for HTTP and gRPC.

Faults are ordinary exceptions: collaborators raise them and the recovery
boundaries in ``api.middleware`` catch and translate them.
"""

from typing import Dict, Optional, Tuple, Type

import grpc
from fastapi.responses import JSONResponse

from infrastructure.monitoring.loguru_logger import FaultLogger, get_fault_logger

from .definitions import FaultKind
from .translation import (
    GRPC_STATUS_TABLE,
    HTTP_STATUS_TABLE,
    GRPCStatusError,
    wrap_message,
)


FAULT_TYPES: Dict[FaultKind, Type["Fault"]] = {}


class Fault(Exception):
    """Base class of the fault catalog."""

    kind: FaultKind

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        kind = cls.__dict__.get("kind")
        if kind is not None:
            FAULT_TYPES[kind] = cls

    def __init__(self, error: BaseException):
        super().__init__(error)
        self._error = error
        self._system = ""
        self.__cause__ = error

    @property
    def system(self) -> str:
        return self._system

    def set_system(self, system: str) -> "Fault":
        """Bind the system label; only the first non-empty label is kept."""
        if not self._system:
            self._system = system
        return self

    def get_name(self) -> FaultKind:
        return self.kind

    def get_error(self) -> BaseException:
        return self._error

    def __str__(self) -> str:
        return f"[ERROR]: {self._error}\n"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._error!r})"

    @property
    def http_status(self) -> int:
        return HTTP_STATUS_TABLE[self.kind]

    @property
    def grpc_code(self) -> grpc.StatusCode:
        return GRPC_STATUS_TABLE[self.kind]

    def report(self, prefix: str = "", fault_logger: Optional[FaultLogger] = None) -> None:
        """Write one warning record tagged with the system label and the cause."""
        sink = fault_logger or get_fault_logger()
        sink.warn(prefix, self._error, system=self._system, kind=self.kind.value)

    def http_report(self) -> JSONResponse:
        """The response that ends the request for this fault."""
        return JSONResponse(
            status_code=self.http_status,
            content={"error": str(self._error), "code": self.kind.value},
        )

    def grpc_report(self, prefix: str = "", context: Optional[grpc.ServicerContext] = None) -> GRPCStatusError:
        """Build the gRPC status for this fault, writing it onto ``context`` when given."""
        status = GRPCStatusError(self.grpc_code, wrap_message(prefix, self._error))
        if context is not None:
            status.apply(context)
        return status


class AuthenticateFault(Fault):
    kind = FaultKind.AUTHENTICATE


class DBAlreadyExistsFault(Fault):
    kind = FaultKind.DB_ALREADY_EXISTS


class DBConnectionFault(Fault):
    kind = FaultKind.DB_CONNECTION


class DBDisconnectionFault(Fault):
    kind = FaultKind.DB_DISCONNECTION


class DBExecuteFault(Fault):
    kind = FaultKind.DB_EXECUTE


class DBRowNotFoundFault(Fault):
    kind = FaultKind.DB_ROW_NOT_FOUND


class DBUpdateNoEffectFault(Fault):
    kind = FaultKind.DB_UPDATE_NO_EFFECT


class ExecuteFault(Fault):
    kind = FaultKind.EXECUTE


class GRPCConnectionFault(Fault):
    kind = FaultKind.GRPC_CONNECTION


class GRPCExecuteFault(Fault):
    kind = FaultKind.GRPC_EXECUTE


class InvalidArgumentFault(Fault):
    kind = FaultKind.INVALID_ARGUMENT


class JSONMarshalFault(Fault):
    kind = FaultKind.JSON_MARSHAL


class JSONUnmarshalFault(Fault):
    kind = FaultKind.JSON_UNMARSHAL


class JWTExecuteFault(Fault):
    kind = FaultKind.JWT_EXECUTE


class DataNotFoundFault(Fault):
    kind = FaultKind.DATA_NOT_FOUND


class PermissionDenyFault(Fault):
    kind = FaultKind.PERMISSION_DENY


class ServerExecuteFault(Fault):
    kind = FaultKind.SERVER_EXECUTE


class VariableFault(Fault):
    kind = FaultKind.VARIABLE


def recover(exc: BaseException) -> Tuple[Fault, bool]:
    """
    Classify a recovered exception.

    Returns the fault to report and whether it belongs to the catalog.
    Anything else is wrapped as a server execution fault.
    """
    if isinstance(exc, Fault):
        return exc, True
    return ServerExecuteFault(exc), False
