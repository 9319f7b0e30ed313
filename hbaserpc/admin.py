"""Administrative calls sent to the master."""

from dataclasses import dataclass, field
from typing import Any, Callable

from hbaserpc.call import BaseCall, Option, OptionError, apply_options
from hbaserpc.messages import BytesBytesPair, TableName

DEFAULT_FAMILY_ATTRIBUTES: dict[str, str] = {
    "BLOOMFILTER": "ROW",
    "VERSIONS": "3",
    "IN_MEMORY": "false",
    "KEEP_DELETED_CELLS": "false",
    "DATA_BLOCK_ENCODING": "FAST_DIFF",
    "TTL": "2147483647",
    "COMPRESSION": "NONE",
    "MIN_VERSIONS": "0",
    "BLOCKCACHE": "true",
    "BLOCKSIZE": "65536",
    "REPLICATION_SCOPE": "0",
}

_DEFAULT_NAMESPACE = b"default"


@dataclass
class ColumnFamilySchema:
    name: bytes | None = None
    attributes: list[BytesBytesPair] = field(default_factory=list)


@dataclass
class TableSchema:
    table_name: TableName | None = None
    attributes: list[BytesBytesPair] = field(default_factory=list)
    column_families: list[ColumnFamilySchema] = field(default_factory=list)


@dataclass
class CreateTableRequest:
    table_schema: TableSchema | None = None
    split_keys: list[bytes] | None = None


@dataclass
class CreateTableResponse:
    proc_id: int | None = None


@dataclass
class DeleteTableRequest:
    table_name: TableName | None = None


@dataclass
class DeleteTableResponse:
    proc_id: int | None = None


@dataclass
class DisableTableRequest:
    table_name: TableName | None = None


@dataclass
class DisableTableResponse:
    proc_id: int | None = None


@dataclass
class EnableTableRequest:
    table_name: TableName | None = None


@dataclass
class EnableTableResponse:
    proc_id: int | None = None


@dataclass
class GetTableNamesRequest:
    regex: str | None = None
    include_sys_tables: bool | None = None
    namespace: str | None = None


@dataclass
class GetTableNamesResponse:
    table_names: list[TableName] = field(default_factory=list)


@dataclass
class GetClusterStatusRequest:
    pass


@dataclass
class GetClusterStatusResponse:
    cluster_status: Any = None


@dataclass
class GetProcedureResultRequest:
    proc_id: int | None = None


@dataclass
class GetProcedureResultResponse:
    state: int | None = None
    start_time: int | None = None
    last_update: int | None = None
    result: bytes | None = None
    exception: Any = None


@dataclass
class SetBalancerRunningRequest:
    on: bool | None = None
    synchronous: bool | None = None


@dataclass
class SetBalancerRunningResponse:
    prev_balance_value: bool | None = None


def _as_bytes(value: str | bytes | None) -> bytes:
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode()
    return bytes(value)


def _pairs(attrs: dict[str, str] | None) -> list[BytesBytesPair]:
    return [BytesBytesPair(first=k.encode(), second=v.encode()) for k, v in (attrs or {}).items()]


class CreateTable(BaseCall):
    """Create a table with the given column families."""

    rpc_name = "CreateTable"
    response_type = CreateTableResponse

    def __init__(self, table: str | bytes, families: dict[str, dict[str, str] | None] | None,
                 *args: Callable[["CreateTable"], None]) -> None:
        super().__init__(_as_bytes(table))
        self.attributes: dict[str, str] | None = None
        self.split_keys: list[bytes] | None = None
        for option in args:
            option(self)
        self.families: dict[str, dict[str, str]] = {
            family: {k: (attrs or {}).get(k, default)
                     for k, default in DEFAULT_FAMILY_ATTRIBUTES.items()}
            for family, attrs in (families or {}).items()
        }

    def to_proto(self) -> CreateTableRequest:
        """Build the CreateTableRequest message."""
        return CreateTableRequest(
            table_schema=TableSchema(
                table_name=TableName(namespace=_DEFAULT_NAMESPACE, qualifier=self.table),
                attributes=_pairs(self.attributes),
                column_families=[
                    ColumnFamilySchema(name=family.encode(), attributes=_pairs(attrs))
                    for family, attrs in self.families.items()
                ],
            ),
            split_keys=self.split_keys,
        )

    def new_response(self) -> CreateTableResponse:
        """An empty CreateTableResponse."""
        return CreateTableResponse()


def split_keys(keys: list[bytes]) -> Callable[[CreateTable], None]:
    """Option setting the split keys of the created table."""

    def apply(ct: CreateTable) -> None:
        ct.split_keys = keys

    return apply


def table_attributes(attrs: dict[str, str]) -> Callable[[CreateTable], None]:
    """Option setting attributes on the created table."""

    def apply(ct: CreateTable) -> None:
        ct.attributes = attrs

    return apply


class _TableCall(BaseCall):
    def __init__(self, table: str | bytes) -> None:
        super().__init__(_as_bytes(table))

    def _table_name(self) -> TableName:
        return TableName(namespace=_DEFAULT_NAMESPACE, qualifier=self.table)


class DeleteTable(_TableCall):
    """Delete a disabled table."""

    rpc_name = "DeleteTable"
    response_type = DeleteTableResponse

    def to_proto(self) -> DeleteTableRequest:
        """Build the DeleteTableRequest message."""
        return DeleteTableRequest(table_name=self._table_name())

    def new_response(self) -> DeleteTableResponse:
        """An empty DeleteTableResponse."""
        return DeleteTableResponse()


class DisableTable(_TableCall):
    """Disable a table."""

    rpc_name = "DisableTable"
    response_type = DisableTableResponse

    def to_proto(self) -> DisableTableRequest:
        """Build the DisableTableRequest message."""
        return DisableTableRequest(table_name=self._table_name())

    def new_response(self) -> DisableTableResponse:
        """An empty DisableTableResponse."""
        return DisableTableResponse()


class EnableTable(_TableCall):
    """Enable a table."""

    rpc_name = "EnableTable"
    response_type = EnableTableResponse

    def to_proto(self) -> EnableTableRequest:
        """Build the EnableTableRequest message."""
        return EnableTableRequest(table_name=self._table_name())

    def new_response(self) -> EnableTableResponse:
        """An empty EnableTableResponse."""
        return EnableTableResponse()


class ListTableNames(BaseCall):
    """List table names; matches all tables unless options narrow it."""

    rpc_name = "GetTableNames"
    response_type = GetTableNamesResponse

    def __init__(self, *args: Option) -> None:
        super().__init__()
        self.regex = ".*"
        self.include_sys_tables = False
        self.namespace = ""
        apply_options(self, args)

    def to_proto(self) -> GetTableNamesRequest:
        """Build the GetTableNamesRequest message."""
        return GetTableNamesRequest(
            regex=self.regex,
            include_sys_tables=self.include_sys_tables,
            namespace=self.namespace,
        )

    def new_response(self) -> GetTableNamesResponse:
        """An empty GetTableNamesResponse."""
        return GetTableNamesResponse()


def _list_call(call: BaseCall, option_name: str) -> ListTableNames:
    if not isinstance(call, ListTableNames):
        raise OptionError(f"{option_name} option can only be used with ListTableNames")
    return call


def list_regex(regex: str) -> Option:
    """Only list tables whose names match regex."""

    def apply(call: BaseCall) -> None:
        _list_call(call, "ListRegex").regex = regex

    return apply


def list_namespace(namespace: str) -> Option:
    """Only list tables in the given namespace."""

    def apply(call: BaseCall) -> None:
        _list_call(call, "ListNamespace").namespace = namespace

    return apply


def list_sys_tables(include: bool) -> Option:
    """Whether system tables are listed."""

    def apply(call: BaseCall) -> None:
        _list_call(call, "ListSysTables").include_sys_tables = include

    return apply


class ClusterStatus(BaseCall):
    """Ask the master for the cluster status."""

    rpc_name = "GetClusterStatus"
    response_type = GetClusterStatusResponse

    def to_proto(self) -> GetClusterStatusRequest:
        """Build the GetClusterStatusRequest message."""
        return GetClusterStatusRequest()

    def new_response(self) -> GetClusterStatusResponse:
        """An empty GetClusterStatusResponse."""
        return GetClusterStatusResponse()


class GetProcedureState(BaseCall):
    """Ask for the state of a master procedure."""

    rpc_name = "getProcedureResult"
    response_type = GetProcedureResultResponse

    def __init__(self, proc_id: int) -> None:
        super().__init__()
        self.proc_id = proc_id

    def to_proto(self) -> GetProcedureResultRequest:
        """Build the GetProcedureResultRequest message."""
        return GetProcedureResultRequest(proc_id=self.proc_id)

    def new_response(self) -> GetProcedureResultResponse:
        """An empty GetProcedureResultResponse."""
        return GetProcedureResultResponse()


class SetBalancer(BaseCall):
    """Turn the region balancer on or off."""

    rpc_name = "SetBalancerRunning"
    response_type = SetBalancerRunningResponse

    def __init__(self, enabled: bool) -> None:
        super().__init__()
        self.enabled = enabled

    def to_proto(self) -> SetBalancerRunningRequest:
        """Build the SetBalancerRunningRequest message."""
        return SetBalancerRunningRequest(on=self.enabled)

    def new_response(self) -> SetBalancerRunningResponse:
        """An empty SetBalancerRunningResponse."""
        return SetBalancerRunningResponse()