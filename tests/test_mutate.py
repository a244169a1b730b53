from dataclasses import replace
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from hbasecalls import messages as pb
from hbasecalls.call import CellBlockError, OptionError
from hbasecalls.get import Get
from hbasecalls.mutate import (
    DurabilityType,
    Mutate,
    delete_one_version,
    durability,
    new_app,
    new_del,
    new_inc,
    new_inc_single,
    new_put,
    timestamp,
    timestamp_uint64,
    ttl,
)
from hbasecalls.query import priority

REGION = SimpleNamespace(name=b"region")
RS = pb.RegionSpecifier(type=pb.RegionSpecifierType.REGION_NAME, value=b"region")
LATEST = b"\x7f\xff\xff\xff\xff\xff\xff\xff"
TS42 = b"\x00\x00\x00\x00\x00\x00\x00*"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

PUT = pb.MutationType.PUT
DELETE = pb.MutationType.DELETE


def mutation(mutate_type, **kwargs):
    kwargs.setdefault("durability", pb.Durability.USE_DEFAULT)
    return pb.MutationProto(row=b"key", mutate_type=mutate_type, **kwargs)


def column(family, *qualifier_values):
    return pb.ColumnValue(family=family, qualifier_values=list(qualifier_values))


def qv(qualifier, value=None, **kwargs):
    return pb.QualifierValue(qualifier=qualifier, value=value, **kwargs)


ONE_CELL = {"cf": {"q": b"value"}}

CASES = [
    pytest.param(lambda t, k, *o: new_put(t, k, None, *o), (), mutation(PUT), [],
                 id="put-empty"),
    pytest.param(lambda t, k, *o: new_put(t, k, None, *o),
                 (durability(DurabilityType.SKIP_WAL),),
                 mutation(PUT, durability=pb.Durability.SKIP_WAL), [], id="skip-wal"),
    pytest.param(lambda t, k, *o: new_put(t, k, None, *o), (ttl(timedelta(seconds=1)),),
                 mutation(PUT, attributes=[pb.NameBytesPair(
                     name="_ttl", value=b"\x00\x00\x00\x00\x00\x00\x03\xe8")]),
                 [], id="ttl"),
    pytest.param(lambda t, k, *o: new_put(t, k, ONE_CELL, *o), (),
                 mutation(PUT, column_values=[column(b"cf", qv(b"q", b"value"))]),
                 [b"\x00\x00\x00\x1f\x00\x00\x00\x12\x00\x00\x00\x05\x00\x03"
                  b"key\x02cfq" + LATEST + b"\x04value"],
                 id="put-one"),
    pytest.param(lambda t, k, *o: new_put(t, k, {
        "cf1": {"q1": b"value", "q2": b"value"},
        "cf2": {"q1": b"value"},
    }, *o), (),
        mutation(PUT, column_values=[
            column(b"cf1", qv(b"q1", b"value"), qv(b"q2", b"value")),
            column(b"cf2", qv(b"q1", b"value")),
        ]),
        [b"\x00\x00\x00!\x00\x00\x00\x14\x00\x00\x00\x05\x00\x03key\x03cf1q1"
         + LATEST + b"\x04value",
         b"\x00\x00\x00!\x00\x00\x00\x14\x00\x00\x00\x05\x00\x03key\x03cf1q2"
         + LATEST + b"\x04value",
         b"\x00\x00\x00!\x00\x00\x00\x14\x00\x00\x00\x05\x00\x03key\x03cf2q1"
         + LATEST + b"\x04value"],
        id="put-many"),
    pytest.param(lambda t, k, *o: new_put(t, k, ONE_CELL, *o),
                 (timestamp(EPOCH + timedelta(milliseconds=42)),),
                 mutation(PUT, timestamp=42,
                          column_values=[column(b"cf", qv(b"q", b"value", timestamp=42))]),
                 [b"\x00\x00\x00\x1f\x00\x00\x00\x12\x00\x00\x00\x05\x00\x03"
                  b"key\x02cfq" + TS42 + b"\x04value"],
                 id="put-timestamp"),
    pytest.param(lambda t, k, *o: new_put(t, k, ONE_CELL, *o), (timestamp_uint64(42),),
                 mutation(PUT, timestamp=42,
                          column_values=[column(b"cf", qv(b"q", b"value", timestamp=42))]),
                 [b"\x00\x00\x00\x1f\x00\x00\x00\x12\x00\x00\x00\x05\x00\x03"
                  b"key\x02cfq" + TS42 + b"\x04value"],
                 id="put-timestamp-uint64"),
    pytest.param(lambda t, k, *o: new_del(t, k, None, *o), (), mutation(DELETE), [],
                 id="del-row"),
    pytest.param(lambda t, k, *o: new_del(t, k, ONE_CELL, *o), (timestamp_uint64(42),),
                 mutation(DELETE, timestamp=42, column_values=[column(
                     b"cf", qv(b"q", b"value", timestamp=42,
                               delete_type=pb.DeleteType.DELETE_MULTIPLE_VERSIONS))]),
                 [b"\x00\x00\x00\x1f\x00\x00\x00\x12\x00\x00\x00\x05\x00\x03"
                  b"key\x02cfq" + TS42 + b"\x0cvalue"],
                 id="del-qualifier"),
    pytest.param(lambda t, k, *o: new_app(t, k, None, *o), (),
                 mutation(pb.MutationType.APPEND), [], id="append"),
    pytest.param(lambda t, k, *o: new_inc(t, k, None, *o), (),
                 mutation(pb.MutationType.INCREMENT), [], id="increment"),
    pytest.param(lambda t, k, *o: new_inc_single(t, k, "cf", "q", 1, *o), (),
                 mutation(pb.MutationType.INCREMENT, column_values=[
                     column(b"cf", qv(b"q", b"\x00\x00\x00\x00\x00\x00\x00\x01"))]),
                 [b"\x00\x00\x00\"\x00\x00\x00\x12\x00\x00\x00\x08\x00\x03key\x02cfq"
                  + LATEST + b"\x04\x00\x00\x00\x00\x00\x00\x00\x01"],
                 id="increment-single"),
    pytest.param(lambda t, k, *o: new_del(t, k, {"cf": None}, *o), (),
                 mutation(DELETE, column_values=[column(
                     b"cf", qv(b"", delete_type=pb.DeleteType.DELETE_FAMILY))]),
                 [b"\x00\x00\x00\x19\x00\x00\x00\x11\x00\x00\x00\x00\x00\x03key\x02cf"
                  + LATEST + b"\x0e"],
                 id="del-family"),
    pytest.param(lambda t, k, *o: new_del(t, k, {"cf": None}, *o), (timestamp_uint64(42),),
                 mutation(DELETE, timestamp=42, column_values=[column(
                     b"cf", qv(b"", timestamp=42, delete_type=pb.DeleteType.DELETE_FAMILY))]),
                 [b"\x00\x00\x00\x19\x00\x00\x00\x11\x00\x00\x00\x00\x00\x03key\x02cf"
                  + TS42 + b"\x0e"],
                 id="del-family-timestamp"),
    pytest.param(lambda t, k, *o: new_del(t, k, {"cf": None}, *o),
                 (timestamp_uint64(42), delete_one_version()),
                 mutation(DELETE, timestamp=42, column_values=[column(
                     b"cf", qv(b"", timestamp=42,
                               delete_type=pb.DeleteType.DELETE_FAMILY_VERSION))]),
                 [b"\x00\x00\x00\x19\x00\x00\x00\x11\x00\x00\x00\x00\x00\x03key\x02cf"
                  + TS42 + b"\n"],
                 id="del-family-version"),
    pytest.param(lambda t, k, *o: new_del(t, k, {"cf": {"a": None}}, *o),
                 (timestamp_uint64(42), delete_one_version()),
                 mutation(DELETE, timestamp=42, column_values=[column(
                     b"cf", qv(b"a", timestamp=42,
                               delete_type=pb.DeleteType.DELETE_ONE_VERSION))]),
                 [b"\x00\x00\x00\x1a\x00\x00\x00\x12\x00\x00\x00\x00\x00\x03key\x02cfa"
                  + TS42 + b"\x08"],
                 id="del-one-version"),
]


@pytest.mark.parametrize("as_str", [False, True])
@pytest.mark.parametrize("build, opts, expected, cells", CASES)
def test_mutate(build, opts, expected, cells, as_str):
    table, key = ("table", "key") if as_str else (b"table", b"key")
    m = build(table, key, *opts)
    assert m.name() == "Mutate"
    assert isinstance(m.new_response(), pb.MutateResponse)
    m.region = REGION

    assert m.to_proto() == pb.MutateRequest(region=RS, mutation=expected)

    request, blocks, size = m.serialize_cell_blocks(None)
    expected_cb = replace(expected, column_values=[], associated_cell_count=len(cells))
    assert request == pb.MutateRequest(region=RS, mutation=expected_cb)
    assert blocks == ([b"".join(cells)] if cells else [])
    assert size == sum(len(cell) for cell in cells)
    assert size == sum(len(block) for block in blocks)


@pytest.mark.parametrize("table, key", [(b"table", b"key"), ("table", "key")])
def test_invalid_durability(table, key):
    with pytest.raises(OptionError, match="invalid durability value"):
        new_put(table, key, None, durability(42))


@pytest.mark.parametrize("table, key", [(b"table", b"key"), ("table", "key")])
def test_delete_one_version_for_whole_row(table, key):
    with pytest.raises(
            OptionError,
            match="'DeleteOneVersion' option cannot be specified for delete entire row request"):
        new_del(table, key, None, delete_one_version())


def test_cellblock_lengths_match_source():
    m = new_put(b"table", b"key", {"cf1": {"q1": b"value", "q2": b"value"},
                                   "cf2": {"q1": b"value"}})
    m.region = REGION
    _, _, size = m.serialize_cell_blocks(None)
    assert size == 111


def test_serialize_appends_to_existing_blocks():
    m = new_put(b"table", b"key", ONE_CELL)
    m.region = REGION
    _, blocks, size = m.serialize_cell_blocks([b"earlier"])
    assert blocks[0] == b"earlier"
    assert len(blocks) == 2
    assert len(blocks[1]) == size == 35


def test_description_is_mutation_type():
    assert new_put(b"t", b"k", None).description() == "PUT"
    assert new_del(b"t", b"k", None).description() == "DELETE"
    assert new_app(b"t", b"k", None).description() == "APPEND"
    assert new_inc(b"t", b"k", None).description() == "INCREMENT"


def test_values_are_kept():
    assert new_put(b"t", b"k", ONE_CELL).values == ONE_CELL


def test_cell_blocks_enabled():
    assert new_put(b"t", b"k", None).cell_blocks_enabled() is True


def test_mutation_options_rejected_by_get():
    with pytest.raises(OptionError, match="'TTL' option can only be used with mutation queries"):
        Get(b"t", b"k", ttl(timedelta(seconds=1)))
    with pytest.raises(OptionError,
                       match="'Durability' option can only be used with mutation queries"):
        Get(b"t", b"k", durability(DurabilityType.SKIP_WAL))


def test_priority_rejected_by_put():
    with pytest.raises(OptionError):
        new_put(b"", b"", None, priority(5))


def test_mutate_is_constructed_directly():
    m = Mutate(b"t", b"k", None, pb.MutationType.INCREMENT)
    assert m.mutation_type is pb.MutationType.INCREMENT
    assert m.key == b"k"


CELLBLOCK = bytes([0, 0, 0, 48, 0, 0, 0, 19, 0, 0, 0, 21, 0, 4, 114, 111, 119, 55, 2, 99,
                   102, 97, 0, 0, 1, 92, 13, 97, 5, 32, 4, 72, 101, 108, 108, 111, 32, 109,
                   121, 32, 110, 97, 109, 101, 32, 105, 115, 32, 68, 111, 103, 46])

EXPECTED_CELLS = [
    pb.Cell(row=b"row7", family=b"cf", qualifier=b"b", timestamp=1494873081120,
            value=b"Hello my name is Dog."),
    pb.Cell(row=b"row7", family=b"cf", qualifier=b"a", timestamp=1494873081120,
            value=b"Hello my name is Dog.", cell_type=pb.CellType.PUT),
]


def test_deserialize_cell_blocks():
    response = pb.MutateResponse(result=pb.Result(cells=[EXPECTED_CELLS[0]],
                                                  associated_cell_count=1))
    m = new_put(b"", b"", None)
    read = m.deserialize_cell_blocks(response, CELLBLOCK)
    assert response.result.cells == EXPECTED_CELLS
    assert read == len(CELLBLOCK)


def test_deserialize_cell_blocks_error():
    response = pb.MutateResponse(result=pb.Result(cells=EXPECTED_CELLS[:1],
                                                  associated_cell_count=1))
    with pytest.raises(CellBlockError):
        new_put(b"", b"", None).deserialize_cell_blocks(response, CELLBLOCK[:10])


def test_deserialize_without_result_reads_nothing():
    response = pb.MutateResponse()
    assert new_put(b"", b"", None).deserialize_cell_blocks(response, CELLBLOCK) == 0
    assert response.result is None