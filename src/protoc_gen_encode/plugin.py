"""
protoc-gen-encode driver

Resolves input:output mapping directives against the schema graph, dispatches
each pair to the message or enum synthesizer and assembles one Go source unit.
Runs as a protoc plugin (request on stdin, response on stdout) when invoked
without arguments, or offline against a serialized FileDescriptorSet.
"""
import argparse
import sys
from pathlib import Path

from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2
from google.protobuf.message import DecodeError

from .errors import EncodeGenError, ParameterError, ResolutionError
from .gofile import GeneratedFile
from .schema import SchemaGraph
from .synth import synthesize_enum, synthesize_message

PROG = 'protoc-gen-encode'

MESSAGE = 'message'
ENUM = 'enum'


class Options:
    """Run parameters."""

    def __init__(self, mappings=None, filename=None, go_import_path=None, import_paths=None):
        self.mappings = list(mappings or [])
        self.filename = filename
        self.go_import_path = go_import_path
        self.import_paths = dict(import_paths or {})  # proto file -> Go import path

    def set(self, name, value):
        if name == 'mapping':
            self.mappings.append(parse_mapping(value))
        elif name == 'filename':
            self.filename = value
        elif name == 'go_import_path':
            self.go_import_path = value
        elif name.startswith('M') and len(name) > 1:
            self.import_paths[name[1:]] = value
        else:
            raise ParameterError(f'unknown parameter "{name}"', name)

    def validate(self):
        for name in ('filename', 'go_import_path'):
            if not getattr(self, name):
                raise ParameterError(f'missing required parameter "{name}"', name)


def parse_mapping(value):
    parts = value.split(':')
    if len(parts) != 2:
        raise ParameterError(
            f'invalid mapping "{value}". Must be of the form input:output', 'mapping')
    return parts[0], parts[1]


def parse_parameter(parameter):
    """Parse a protoc parameter string: comma-separated name=value items."""
    options = Options()
    for item in parameter.split(','):
        item = item.strip()
        if not item:
            continue
        name, _, value = item.partition('=')
        options.set(name, value)
    return options


class Resolution:
    """Outcome of resolving one directive: a same-kind pair, or nothing."""

    def __init__(self, kind, input_def=None, output_def=None):
        self.kind = kind  # MESSAGE, ENUM or None when neither name resolved
        self.input = input_def
        self.output = output_def

    def __repr__(self):
        return f'Resolution({self.kind}, {self.input!r}, {self.output!r})'


def resolve(graph, input_name, output_name):
    """Resolve both names in the message namespace, then the enum namespace.

    One side found without its counterpart of the same kind is an error,
    which also covers a message paired with an enum.
    """
    in_msg, in_enum = graph.lookup(input_name)
    out_msg, out_enum = graph.lookup(output_name)
    for kind, in_def, out_def in ((MESSAGE, in_msg, out_msg), (ENUM, in_enum, out_enum)):
        if in_def is not None and out_def is None:
            raise ResolutionError(f'output {kind} "{output_name}" not found', kind, output_name)
        if in_def is None and out_def is not None:
            raise ResolutionError(f'input {kind} "{input_name}" not found', kind, input_name)
        if in_def is not None:
            return Resolution(kind, in_def, out_def)
    return Resolution(None)


def generate(file_descriptors, options, verbose=False):
    """Run every directive and return the finished GeneratedFile.

    Raises EncodeGenError on the first failure; nothing is returned then.
    """
    options.validate()
    graph = SchemaGraph.from_files(file_descriptors, options.import_paths)
    g = GeneratedFile(options.filename, options.go_import_path)

    for input_name, output_name in options.mappings:
        r = resolve(graph, input_name, output_name)
        if r.kind is None:
            print(f'Warning: mapping {input_name}:{output_name} matched no message or enum, skipping',
                  file=sys.stderr)
            continue
        if verbose:
            print(f'  {r.kind}: {r.input.full_name} -> {r.output.full_name}', file=sys.stderr)
        if r.kind == MESSAGE:
            g.extend(synthesize_message(g, r.input, r.output))
        else:
            g.extend(synthesize_enum(g, r.input, r.output))
    return g


def handle_request(request):
    """Turn a CodeGeneratorRequest into a CodeGeneratorResponse."""
    response = plugin_pb2.CodeGeneratorResponse()
    response.supported_features = plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL
    try:
        options = parse_parameter(request.parameter)
        g = generate(request.proto_file, options)
    except EncodeGenError as e:
        response.error = str(e)
        return response
    out = response.file.add()
    out.name = g.filename
    out.content = g.content()
    return response


def run_plugin(stdin, stdout):
    request = plugin_pb2.CodeGeneratorRequest()
    request.ParseFromString(stdin.read())
    response = handle_request(request)
    if response.HasField('error'):
        print(f'{PROG}: {response.error}', file=sys.stderr)
    stdout.write(response.SerializeToString())
    stdout.flush()
    return 0


def _import_path_override(value):
    name, sep, path = value.partition('=')
    if not sep or not name or not path:
        raise argparse.ArgumentTypeError(f'expected FILE=IMPORT_PATH, got "{value}"')
    return name, path


def build_parser():
    ap = argparse.ArgumentParser(
        prog=PROG,
        description='Generate typed Go encoders between protobuf messages and enums.')
    ap.add_argument('--descriptor-set', required=True, type=Path,
                    help='serialized FileDescriptorSet (protoc --descriptor_set_out --include_imports)')
    ap.add_argument('--mapping', action='append', default=[], metavar='INPUT:OUTPUT',
                    help='full names of an input and output message or enum (repeatable)')
    ap.add_argument('--filename', required=True, help='name of the generated Go file')
    ap.add_argument('--go-import-path', required=True, help='Go import path of the generated file')
    ap.add_argument('--out', type=Path, default=Path('.'), help='output directory')
    ap.add_argument('-M', dest='import_paths', action='append', default=[],
                    type=_import_path_override, metavar='FILE=IMPORT_PATH',
                    help='override the Go import path of a proto file')
    return ap


def run_cli(argv):
    args = build_parser().parse_args(argv)
    print(f'Reading {args.descriptor_set}...', file=sys.stderr)
    fds = descriptor_pb2.FileDescriptorSet()
    try:
        fds.ParseFromString(args.descriptor_set.read_bytes())
        options = Options(filename=args.filename, go_import_path=args.go_import_path,
                          import_paths=dict(args.import_paths))
        for value in args.mapping:
            options.mappings.append(parse_mapping(value))
        g = generate(fds.file, options, verbose=True)
    except (OSError, DecodeError, EncodeGenError) as e:
        print(f'{PROG}: error: {e}', file=sys.stderr)
        return 1

    out_path = args.out / g.filename
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(g.content(), encoding='utf-8')
    print(f'Wrote {out_path} ({len(options.mappings)} mappings)', file=sys.stderr)
    return 0


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        return run_plugin(sys.stdin.buffer, sys.stdout.buffer)
    return run_cli(argv)
