"""Snapshot calls: take, check, delete, list and restore table snapshots."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from hbaserpc.call import BaseCall, Option, OptionError, apply_options


class SnapshotType(IntEnum):
    DISABLED = 0
    FLUSH = 1
    SKIPFLUSH = 2


@dataclass
class SnapshotDescription:
    name: str | None = None
    table: str | None = None
    creation_time: int | None = None
    type: SnapshotType | None = None
    version: int | None = None
    owner: str | None = None


@dataclass
class SnapshotRequest:
    snapshot: SnapshotDescription | None = None


@dataclass
class SnapshotResponse:
    expected_timeout: int | None = None


@dataclass
class IsSnapshotDoneResponse:
    done: bool | None = None
    snapshot: SnapshotDescription | None = None


@dataclass
class DeleteSnapshotResponse:
    pass


@dataclass
class RestoreSnapshotResponse:
    proc_id: int | None = None


@dataclass
class IsRestoreSnapshotDoneResponse:
    done: bool | None = None


@dataclass
class GetCompletedSnapshotsRequest:
    pass


@dataclass
class GetCompletedSnapshotsResponse:
    snapshots: list[SnapshotDescription] = field(default_factory=list)


class Snapshot(BaseCall):
    """Take a snapshot of a table."""

    rpc_name = "Snapshot"
    response_type = SnapshotResponse

    def __init__(self, name: str, table: str, *args: Option) -> None:
        super().__init__(table.encode())
        self.snapshot_name = name
        self.snapshot_table = table
        self.snapshot_type: SnapshotType | None = None
        self.version: int | None = None
        self.owner = ""
        apply_options(self, args)

    def description_proto(self) -> SnapshotDescription:
        """The description of the snapshot as a message."""
        return SnapshotDescription(
            type=self.snapshot_type,
            table=self.snapshot_table,
            name=self.snapshot_name,
            version=self.version,
            owner=self.owner,
        )

    def to_proto(self) -> SnapshotRequest:
        """Build the SnapshotRequest message."""
        return SnapshotRequest(snapshot=self.description_proto())

    def new_response(self) -> SnapshotResponse:
        """An empty SnapshotResponse."""
        return SnapshotResponse()


class _SnapshotWrapper:
    """A call about an existing Snapshot; shares its state and request."""

    rpc_name = ""
    response_type: type = SnapshotResponse

    def __init__(self, snapshot: Snapshot) -> None:
        self.snapshot = snapshot

    def __getattr__(self, name: str) -> Any:
        return getattr(self.snapshot, name)

    @property
    def region(self) -> Any:
        """Region of the underlying snapshot call."""
        return self.snapshot.region

    @region.setter
    def region(self, value: Any) -> None:
        self.snapshot.region = value

    def name(self) -> str:
        """Name of the remote method."""
        return self.rpc_name

    def new_response(self) -> Any:
        """An empty response message of this call."""
        return self.response_type()


class SnapshotDone(_SnapshotWrapper):
    """Check whether a snapshot is complete."""

    rpc_name = "IsSnapshotDone"
    response_type = IsSnapshotDoneResponse


class DeleteSnapshot(_SnapshotWrapper):
    """Delete a snapshot."""

    rpc_name = "DeleteSnapshot"
    response_type = DeleteSnapshotResponse


class RestoreSnapshot(_SnapshotWrapper):
    """Restore a snapshot."""

    rpc_name = "RestoreSnapshot"
    response_type = RestoreSnapshotResponse


class RestoreSnapshotDone(_SnapshotWrapper):
    """Check whether a snapshot restore is complete."""

    rpc_name = "IsRestoreSnapshotDone"
    response_type = IsRestoreSnapshotDoneResponse


class ListSnapshots(BaseCall):
    """List all completed snapshots."""

    rpc_name = "GetCompletedSnapshots"
    response_type = GetCompletedSnapshotsResponse

    def to_proto(self) -> GetCompletedSnapshotsRequest:
        """Build the GetCompletedSnapshotsRequest message."""
        return GetCompletedSnapshotsRequest()

    def new_response(self) -> GetCompletedSnapshotsResponse:
        """An empty GetCompletedSnapshotsResponse."""
        return GetCompletedSnapshotsResponse()


def _snapshot(call: BaseCall, option_name: str) -> Snapshot:
    if not isinstance(call, Snapshot):
        raise OptionError(f"'{option_name}' option can only be used with Snapshot queries")
    return call


def snapshot_version(version: int) -> Option:
    """Set the version of the snapshot."""

    def apply(call: BaseCall) -> None:
        _snapshot(call, "SnapshotVersion").version = version

    return apply


def snapshot_owner(owner: str) -> Option:
    """Set the owner of the snapshot."""

    def apply(call: BaseCall) -> None:
        _snapshot(call, "SnapshotOwner").owner = owner

    return apply


def snapshot_skip_flush() -> Option:
    """Do not flush memstores when taking the snapshot."""

    def apply(call: BaseCall) -> None:
        _snapshot(call, "SnapshotSkipFlush").snapshot_type = SnapshotType.SKIPFLUSH

    return apply