"""Pytest configuration and fixtures for protoc-gen-encode tests"""

import pytest
from pathlib import Path
import sys

# Add src (and this directory, for the descriptor builders) to path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))
sys.path.insert(0, str(Path(__file__).parent))

from protos import GO_IMPORT_PATH, enum, field, message, proto_file  # noqa: E402


@pytest.fixture
def gen_file():
    """An empty generated file declared in package encoders"""
    from protoc_gen_encode.gofile import GeneratedFile
    return GeneratedFile('encode.go', GO_IMPORT_PATH)


@pytest.fixture
def user_file():
    """Scenario A: UserOut adds email to UserIn, same Go package as the output"""
    return proto_file('app/user.proto', 'app', messages=[
        message('UserIn', [field('id', 1, 'int32'), field('name', 2, 'string')]),
        message('UserOut', [
            field('id', 1, 'int32'),
            field('name', 2, 'string'),
            field('email', 3, 'string'),
        ]),
    ], go_package=GO_IMPORT_PATH + ';encoders')


@pytest.fixture
def versioned_files():
    """v1 and v2 of the same schema in separate packages"""
    v1 = proto_file('v1/status.proto', 'v1', messages=[
        message('Account', [
            field('status', 1, 'enum', ref='.v1.Status'),
            field('legacy_code', 2, 'int32'),
        ]),
    ], enums=[enum('Status', ['A', 'B', 'C'])], go_package='example.com/app/v1;v1pb')
    v2 = proto_file('v2/status.proto', 'v2', messages=[
        message('Account', [
            field('status', 1, 'enum', ref='.v2.Status'),
            field('region', 2, 'string'),
        ]),
    ], enums=[enum('Status', ['A', 'B'])], go_package='example.com/app/v2;v2pb')
    return [v1, v2]


@pytest.fixture
def oneof_file():
    """Fields moving into and out of oneof groups between Shape and Figure"""
    return proto_file('app/shape.proto', 'app', messages=[
        message('Point', [field('x', 1, 'int32')]),
        message('Shape', [
            field('radius', 1, 'double', oneof=0),
            field('side', 2, 'double', oneof=0),
            field('label', 3, 'string'),
            field('origin', 4, 'message', ref='.app.Point', oneof=0),
            field('blob', 5, 'bytes', oneof=0),
        ], oneofs=['kind']),
        message('Figure', [
            field('radius', 1, 'double'),
            field('side', 2, 'double', oneof=0),
            field('label', 3, 'string', oneof=0),
            field('origin', 4, 'message', ref='.app.Point', oneof=0),
            field('blob', 5, 'bytes', oneof=0),
        ], oneofs=['kind']),
    ], go_package=GO_IMPORT_PATH + ';encoders')
