# hbasecalls

Request objects for HBase's RPC protocol in plain Python: gets, scans,
mutations, check-and-put, snapshots and the admin calls, together with the
cell-block encoder and decoder that region servers use. Messages are plain
dataclasses defined in `hbasecalls.messages`.

## Installing

```
pip install hbasecalls
```

To run the test suite:

```
pip install "hbasecalls[test]"
pytest
```

## Regions

Calls sent to a region server build a region specifier from the call's
`region` attribute. Set it before calling `to_proto()` or
`serialize_cell_blocks()`; otherwise a `ValueError` is raised. Any object
with a `name` attribute (bytes) will do, or one with a `region_specifier()`
method returning a `RegionSpecifier`.

```python
from types import SimpleNamespace

region = SimpleNamespace(name=b"region-name")
```

## Reads

```python
from hbasecalls.get import Get
from hbasecalls.query import families, max_versions, time_range_uint64

get = Get(b"table", b"row-1",
          families({"cf": ["a", "b"]}),
          max_versions(3),
          time_range_uint64(1000, 2000),
          ctx=None)
get.exists_only()
get.region = region
request = get.to_proto()          # a messages.GetRequest
```

Options are callables applied in order when the call is built. An option
that does not apply to the call, or a value it refuses, raises
`hbasecalls.call.OptionError`. The query options in `hbasecalls.query` are
`families`, `filters`, `time_range`, `time_range_uint64`, `max_versions`,
`max_results_per_column_family`, `result_offset`, `cache_blocks`,
`consistency` and `priority`. `filters` takes a `messages.Filter` or any
object with a `construct_pb_filter()` method.

Scans work the same way:

```python
from hbasecalls.scan import Scan, number_of_rows, reversed_scan

scan = Scan(b"table", number_of_rows(100), reversed_scan(),
            start_row=b"a", stop_row=b"z", ctx=None)
scan.region = region
request = scan.to_proto()
```

Scan-only options are `scanner_id`, `close_scanner`, `max_result_size`,
`number_of_rows`, `allow_partial_results`, `track_scan_metrics`,
`reversed_scan` and `attribute`.

## Writes

```python
from hbasecalls.mutate import DurabilityType, durability, new_del, new_put

put = new_put(b"table", b"row-1", {"cf": {"q": b"value"}},
              durability(DurabilityType.SKIP_WAL))
put.region = region
request = put.to_proto()
message, blocks, size = put.serialize_cell_blocks([])
```

`new_del` takes `None` to remove a whole row, a family mapped to `None` to
remove a family, or a family mapped to qualifiers to remove single columns.
`new_app`, `new_inc` and `new_inc_single` build appends and increments.
Mutation options are `ttl`, `timestamp`, `timestamp_uint64`, `durability`
and `delete_one_version`; `hbasecalls.call.skip_batch` works with gets and
mutations.

`hbasecalls.checkandput.CheckAndPut` wraps a put with a condition that one
cell equals an expected value; it raises `ValueError` for anything but a put.

## Cell blocks

```python
from hbasecalls.call import cell_from_cell_block, deserialize_cell_blocks

cell, consumed = cell_from_cell_block(data)
cells, consumed = deserialize_cell_blocks(data, 2)
```

Truncated or inconsistent buffers raise `hbasecalls.call.CellBlockError`.
`Get`, `Scan` and `Mutate` each have `deserialize_cell_blocks(response, data)`
to fill a response message from the cell blocks that follow it.
`hbasecalls.call.to_local_result` turns a result message into a `Result`.

## Admin calls

`hbasecalls.admin` holds `CreateTable` (with the `split_keys` and
`table_attributes` options), `DeleteTable`, `DisableTable`, `EnableTable`,
`SetBalancer`, `GetProcedureState` and `ClusterStatus`.
`hbasecalls.listing` holds `ListNamespaces`, `ListTableNames` (options
`list_regex`, `list_namespace`, `list_sys_tables`), `GetTableDescriptor`
and `MoveRegion` (option `with_destination_region_server`).
`hbasecalls.snapshot` holds `Snapshot`, `SnapshotDone`, `DeleteSnapshot`,
`ListSnapshots`, `RestoreSnapshot` and `RestoreSnapshotDone`, with the
options `snapshot_version`, `snapshot_owner` and `snapshot_skip_flush`.
Their `new_response()` returns a `messages.AdminResponse` named after the
method.

## Metrics and tracing

`hbasecalls.metrics` offers small thread-safe `Histogram` and `Gauge` types
and `exponential_buckets`, plus the ready-made `OPERATION_DURATION_SECONDS`,
`SENDBATCH_SPLIT_COUNT` and `CACHED_REGION_TOTAL`.
`hbasecalls.observability` carries trace headers in a request header through
`RequestTracePropagator`, and `observe_with_trace` records a value with the
trace id of a sampled `SpanContext` as an exemplar.

## What this package does not do

It opens no connections, looks up no regions and runs no client: transport,
retries and batching are up to you. Messages are Python dataclasses; the
package does not encode them to or decode them from protobuf wire format,
and it ships no filter classes of its own.