"""Snapshot calls: take, check, delete, list and restore snapshots."""

from __future__ import annotations

from typing import Any, Callable

from . import messages as pb
from .call import Call, OptionError

Option = Callable[[Call], None]


class Snapshot(Call):
    """Take a snapshot of a table."""

    def __init__(self, name: str, table: str, *args: Option, ctx: Any = None) -> None:
        super().__init__(table, b"", ctx)
        self.snapshot_name = name
        self.snapshot_table = table
        self.snapshot_type: pb.SnapshotType | None = None
        self.version: int | None = None
        self.owner = ""
        self.apply_options(args)

    def name(self) -> str:
        return "Snapshot"

    def description(self) -> str:
        # Every call of the snapshot family is reported under one name.
        return "Snapshot"

    def description_proto(self) -> pb.SnapshotDescription:
        """The snapshot description message."""
        return pb.SnapshotDescription(
            type=self.snapshot_type,
            table=self.snapshot_table,
            name=self.snapshot_name,
            version=self.version,
            owner=self.owner,
        )

    def to_proto(self) -> pb.SnapshotRequest:
        return pb.SnapshotRequest(snapshot=self.description_proto())

    def new_response(self) -> pb.AdminResponse:
        return pb.AdminResponse(method=self.name())


class _SnapshotFollowUp(Snapshot):
    """A call about an existing snapshot, sharing its settings."""

    def __init__(self, snapshot: Snapshot) -> None:
        vars(self).update(vars(snapshot))


class SnapshotDone(_SnapshotFollowUp):
    """Ask whether a snapshot has completed."""

    def __init__(self, snapshot: Snapshot) -> None:
        super().__init__(snapshot)

    def name(self) -> str:
        return "IsSnapshotDone"

    def new_response(self) -> pb.AdminResponse:
        return pb.AdminResponse(method=self.name())


class DeleteSnapshot(_SnapshotFollowUp):
    """Delete a snapshot."""

    def __init__(self, snapshot: Snapshot) -> None:
        super().__init__(snapshot)

    def name(self) -> str:
        return "DeleteSnapshot"

    def new_response(self) -> pb.AdminResponse:
        return pb.AdminResponse(method=self.name())


class RestoreSnapshot(_SnapshotFollowUp):
    """Restore a table from a snapshot."""

    def __init__(self, snapshot: Snapshot) -> None:
        super().__init__(snapshot)

    def name(self) -> str:
        return "RestoreSnapshot"

    def new_response(self) -> pb.AdminResponse:
        return pb.AdminResponse(method=self.name())


class RestoreSnapshotDone(_SnapshotFollowUp):
    """Ask whether restoring a snapshot has completed."""

    def __init__(self, snapshot: Snapshot) -> None:
        super().__init__(snapshot)

    def name(self) -> str:
        return "IsRestoreSnapshotDone"

    def new_response(self) -> pb.AdminResponse:
        return pb.AdminResponse(method=self.name())


class ListSnapshots(Call):
    """List all completed snapshots."""

    def __init__(self, ctx: Any = None) -> None:
        super().__init__(b"", b"", ctx)

    def name(self) -> str:
        return "GetCompletedSnapshots"

    def to_proto(self) -> pb.GetCompletedSnapshotsRequest:
        return pb.GetCompletedSnapshotsRequest()

    def new_response(self) -> pb.AdminResponse:
        return pb.AdminResponse(method=self.name())


def _snapshot(call: Call, message: str) -> Snapshot:
    if not isinstance(call, Snapshot):
        raise OptionError(message)
    return call


def snapshot_version(version: int) -> Option:
    """Set the version of the snapshot."""

    def option(call: Call) -> None:
        _snapshot(call, "'SnapshotVersion' option can only be used with Snapshot queries"
                  ).version = version

    return option


def snapshot_owner(owner: str) -> Option:
    """Set the owner of the snapshot."""

    def option(call: Call) -> None:
        _snapshot(call, "'SnapshotOwner' option can only be used with Snapshot queries"
                  ).owner = owner

    return option


def snapshot_skip_flush() -> Option:
    """Take the snapshot without flushing the memstore first."""

    def option(call: Call) -> None:
        _snapshot(call, "'SnapshotSkipFlush' option can only be used with Snapshot queries"
                  ).snapshot_type = pb.SnapshotType.SKIPFLUSH

    return option