from hbasecalls.messages import (
    AdminResponse,
    Cell,
    CellType,
    Column,
    Durability,
    Get,
    GetRequest,
    RegionSpecifier,
    RegionSpecifierType,
    RPCTInfo,
    ScanRequest,
    TimeRange,
)


def test_cell_fields_default_to_unset():
    cell = Cell()
    assert (cell.row, cell.family, cell.qualifier) == (None, None, None)
    assert cell.timestamp is None and cell.value is None and cell.cell_type is None


def test_repeated_fields_are_independent_lists():
    first = Column(family=b"cf")
    second = Column(family=b"cf")
    first.qualifiers.append(b"q")
    assert second.qualifiers == []
    assert first.qualifiers == [b"q"]


def test_nested_messages_compare_by_value():
    def build():
        return GetRequest(
            region=RegionSpecifier(type=RegionSpecifierType.REGION_NAME, value=b"region"),
            get=Get(row=b"key", time_range=TimeRange()),
        )

    assert build() == build()
    changed = build()
    changed.get.time_range.from_ = 5
    assert (changed == build()) is False


def test_cell_type_values_match_wire_types():
    assert CellType.PUT == 4
    assert CellType.DELETE_FAMILY == 14
    assert CellType(CellType.DELETE_COLUMN.value) is CellType.DELETE_COLUMN


def test_durability_enumeration():
    assert Durability(1) is Durability.SKIP_WAL
    assert list(Durability)[0] is Durability.USE_DEFAULT
    assert list(Durability)[-1] is Durability.FSYNC_WAL


def test_scan_request_defaults():
    request = ScanRequest()
    assert request.scan is None
    assert request.scanner_id is None


def test_trace_headers_are_mutable_per_instance():
    info = RPCTInfo()
    info.headers["k"] = "v"
    assert RPCTInfo().headers == {}
    assert info.headers == {"k": "v"}


def test_admin_response_holds_method():
    response = AdminResponse(method="CreateTable")
    assert response.method == "CreateTable"
    assert response.fields == {}