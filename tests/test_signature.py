#!/usr/bin/env python3
"""Tests for structural field signatures and their Go rendering"""

import pytest

from protos import GO_IMPORT_PATH, enum, field, map_entry, message, proto_file
from protoc_gen_encode.errors import GoPackageError
from protoc_gen_encode.schema import SchemaGraph
from protoc_gen_encode.signature import (
    LIST, MAP, OPTIONAL, field_go_type, field_type, type_equal,
)


@pytest.fixture
def types_graph():
    fd = proto_file('app/types.proto', 'app', messages=[
        message('Item'),
        message('Sample', [
            field('flag', 1, 'bool'),
            field('count', 2, 'int32'),
            field('zcount', 3, 'sint32'),
            field('ucount', 4, 'fixed32'),
            field('big', 5, 'sfixed64'),
            field('ratio', 6, 'float'),
            field('score', 7, 'double'),
            field('name', 8, 'string'),
            field('blob', 9, 'bytes'),
            field('item', 10, 'message', ref='.app.Item'),
            field('status', 11, 'enum', ref='.app.Status'),
            field('names', 12, 'string', repeated=True),
            field('items', 13, 'message', ref='.app.Item', repeated=True),
            field('by_id', 14, 'message', ref='.app.Sample.ByIdEntry', repeated=True),
            field('nick', 15, 'string', oneof=0, optional=True),
            field('maybe_blob', 16, 'bytes', oneof=1, optional=True),
            field('legacy', 17, 'message', ref='.app.Item', weak=True),
        ], oneofs=['_nick', '_maybe_blob'], nested=[
            map_entry('ByIdEntry', 'int64', 'message', value_ref='.app.Item'),
        ]),
    ], enums=[enum('Status', ['STATUS_UNKNOWN'])], go_package=GO_IMPORT_PATH + ';encoders')
    return SchemaGraph.from_files([fd])


def fields_of(graph, name='app.Sample'):
    return {f.name: f for f in graph.messages[name].fields}


class TestFieldType:
    """Signature derivation"""

    def test_scalar_kinds_collapse_to_go_types(self, types_graph):
        f = fields_of(types_graph)
        assert field_type(f['count']).kind == 'int32'
        assert field_type(f['zcount']) == field_type(f['count'])
        assert field_type(f['ucount']).kind == 'uint32'
        assert field_type(f['big']).kind == 'int64'
        assert field_type(f['ratio']).kind == 'float32'
        assert field_type(f['score']).kind == 'float64'
        assert field_type(f['blob']).kind == '[]byte'

    def test_wrappers(self, types_graph):
        f = fields_of(types_graph)
        assert field_type(f['name']).wrapper is None
        assert field_type(f['names']).wrapper == LIST
        assert field_type(f['by_id']).wrapper == MAP
        assert field_type(f['nick']).wrapper == OPTIONAL

    def test_nilable_types_never_optional(self, types_graph):
        """Bytes and message references carry their own presence"""
        f = fields_of(types_graph)
        assert field_type(f['maybe_blob']).wrapper is None
        assert field_type(f['item']).wrapper is None
        assert f['item'].has_presence

    def test_map_key_and_value(self, types_graph):
        ft = field_type(fields_of(types_graph)['by_id'])
        assert ft.key.kind == 'int64'
        assert ft.value.kind == 'message'
        assert ft.value.ref.full_name == 'app.Item'

    def test_equality_is_structural(self, types_graph):
        f = fields_of(types_graph)
        assert type_equal(f['count'], f['zcount'])
        assert not type_equal(f['name'], f['names'])
        assert not type_equal(f['name'], f['nick'])
        assert not type_equal(f['item'], f['items'])

    def test_equality_symmetric_and_stable(self, types_graph):
        f = list(fields_of(types_graph).values())
        for a in f:
            for b in f:
                assert type_equal(a, b) == type_equal(b, a)
                assert type_equal(a, b) == type_equal(a, b)

    def test_different_enum_references_differ(self, versioned_files):
        graph = SchemaGraph.from_files(versioned_files)
        v1 = graph.messages['v1.Account'].fields[0]
        v2 = graph.messages['v2.Account'].fields[0]
        assert not type_equal(v1, v2)


class TestGoRendering:
    """Go source for signatures"""

    def test_same_package_rendering(self, types_graph, gen_file):
        f = fields_of(types_graph)
        assert field_go_type(gen_file, f['flag']) == 'bool'
        assert field_go_type(gen_file, f['blob']) == '[]byte'
        assert field_go_type(gen_file, f['item']) == '*Item'
        assert field_go_type(gen_file, f['status']) == 'Status'
        assert field_go_type(gen_file, f['names']) == '[]string'
        assert field_go_type(gen_file, f['items']) == '[]*Item'
        assert field_go_type(gen_file, f['by_id']) == 'map[int64]*Item'
        assert field_go_type(gen_file, f['nick']) == '*string'
        assert field_go_type(gen_file, f['maybe_blob']) == '[]byte'
        assert field_go_type(gen_file, f['legacy']) == 'struct{}'
        assert gen_file.imports == {}

    def test_cross_package_rendering_records_import(self, versioned_files, gen_file):
        graph = SchemaGraph.from_files(versioned_files)
        status = graph.messages['v1.Account'].fields[0]
        assert field_go_type(gen_file, status) == 'v1pb.Status'
        assert gen_file.imports == {'example.com/app/v1': 'v1pb'}

    def test_unknown_import_path(self, gen_file):
        fd = proto_file('nogo.proto', 'x', messages=[
            message('M', [field('e', 1, 'enum', ref='.x.E')]),
        ], enums=[enum('E', ['E0'])])
        graph = SchemaGraph.from_files([fd])
        with pytest.raises(GoPackageError, match='nogo.proto'):
            field_go_type(gen_file, graph.messages['x.M'].fields[0])
