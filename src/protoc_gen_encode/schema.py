"""
Schema graph built from protobuf file descriptors.

Messages and enums from every file of the compilation unit are registered
under their full protobuf names (no leading dot), nested definitions included,
and annotated with the Go identifiers the Go protobuf generator assigns them.
The graph is read-only once built.
"""
from google.protobuf import descriptor_pb2

from .naming import GENERATED_METHODS, go_camel_case, parse_go_package

FDP = descriptor_pb2.FieldDescriptorProto
FeatureSet = descriptor_pb2.FeatureSet


class GoIdent:
    """A Go identifier together with the import path that declares it."""

    def __init__(self, name, import_path, package_name, source=None):
        self.name = name
        self.import_path = import_path
        self.package_name = package_name
        self.source = source  # proto file that produced it

    def __eq__(self, other):
        return (isinstance(other, GoIdent) and self.name == other.name
                and self.import_path == other.import_path)

    def __hash__(self):
        return hash((self.name, self.import_path))

    def __repr__(self):
        return f'GoIdent({self.import_path!r}.{self.name})'


class SchemaFile:
    def __init__(self, name, package, syntax, go_import_path, go_package_name, presence):
        self.name = name
        self.package = package
        self.syntax = syntax
        self.go_import_path = go_import_path
        self.go_package_name = go_package_name
        self.presence = presence  # default field_presence feature

    def ident(self, go_name):
        return GoIdent(go_name, self.go_import_path, self.go_package_name, self.name)


class VariantGroup:
    """A real (non-synthetic) oneof of a message."""

    def __init__(self, name, go_name):
        self.name = name
        self.go_name = go_name
        self.fields = []


class Field:
    def __init__(self, desc, parent, presence_feature):
        self.desc = desc
        self.parent = parent
        self.name = desc.name
        self.number = desc.number
        self.kind = desc.type
        self.type_name = desc.type_name.lstrip('.')
        self.go_name = go_camel_case(desc.name)
        self.go_ident = None  # oneof wrapper type, set by the parent record
        self.oneof = None
        self.message = None
        self.enum = None
        self.presence_feature = presence_feature

    @property
    def is_list(self):
        return self.desc.label == FDP.LABEL_REPEATED and not self.is_map

    @property
    def is_map(self):
        return (self.desc.label == FDP.LABEL_REPEATED and self.message is not None
                and self.message.is_map_entry)

    @property
    def is_weak(self):
        return self.desc.options.weak

    @property
    def in_any_oneof(self):
        return self.desc.HasField('oneof_index')

    @property
    def has_presence(self):
        if self.desc.label == FDP.LABEL_REPEATED:
            return False
        if self.kind in (FDP.TYPE_MESSAGE, FDP.TYPE_GROUP):
            return True
        if self.in_any_oneof:
            return True
        syntax = self.parent.file.syntax
        if syntax == 'proto3':
            return False
        if syntax == 'editions':
            return self.presence_feature != FeatureSet.IMPLICIT
        return True

    def __repr__(self):
        return f'Field({self.parent.full_name}.{self.name})'


class Record:
    def __init__(self, desc, file, full_name, go_ident, parent=None):
        self.desc = desc
        self.file = file
        self.full_name = full_name
        self.name = desc.name
        self.go_ident = go_ident
        self.parent = parent
        self.is_map_entry = desc.options.map_entry
        self.fields = []
        self.oneofs = []
        self.messages = []
        self.enums = []

    def __repr__(self):
        return f'Record({self.full_name})'


class EnumValue:
    def __init__(self, name, number, go_ident):
        self.name = name
        self.number = number
        self.go_ident = go_ident

    def __repr__(self):
        return f'EnumValue({self.name}={self.number})'


class Enumeration:
    def __init__(self, desc, file, full_name, go_ident, parent=None):
        self.desc = desc
        self.file = file
        self.full_name = full_name
        self.name = desc.name
        self.go_ident = go_ident
        self.parent = parent
        # Values are prefixed by the enclosing message, or the enum itself at file scope
        prefix = parent.go_ident.name if parent is not None else go_ident.name
        self.values = [
            EnumValue(v.name, v.number, file.ident(f'{prefix}_{v.name}'))
            for v in desc.value
        ]

    def __repr__(self):
        return f'Enumeration({self.full_name})'


def _presence_feature(options, inherited):
    if options.HasField('features') and options.features.HasField('field_presence'):
        return options.features.field_presence
    return inherited


def _schema_file(fd, import_paths):
    syntax = fd.syntax or 'proto2'
    go_package = import_paths.get(fd.name)
    if go_package is None and fd.options.HasField('go_package'):
        go_package = fd.options.go_package
    import_path = package_name = None
    if go_package:
        import_path, package_name = parse_go_package(go_package)
    presence = _presence_feature(fd.options, FeatureSet.EXPLICIT)
    return SchemaFile(fd.name, fd.package, syntax, import_path, package_name, presence)


class SchemaGraph:
    """Flat lookup of every message and enum by full name."""

    def __init__(self):
        self.messages = {}
        self.enums = {}
        self.files = []

    @classmethod
    def from_files(cls, file_descriptors, import_paths=None):
        """Build the graph from FileDescriptorProto objects.

        import_paths maps proto file names to Go import paths and takes
        precedence over each file's go_package option.
        """
        graph = cls()
        import_paths = import_paths or {}
        for fd in file_descriptors:
            sf = _schema_file(fd, import_paths)
            graph.files.append(sf)
            prefix = f'{fd.package}.' if fd.package else ''
            for md in fd.message_type:
                graph._add_message(md, sf, prefix + md.name, None, sf.presence)
            for ed in fd.enum_type:
                graph._add_enum(ed, sf, prefix + ed.name, None)
        for record in graph.messages.values():
            graph._link_fields(record)
        return graph

    def _add_message(self, md, sf, full_name, parent, presence):
        go_name = go_camel_case(md.name)
        if parent is not None:
            go_name = f'{parent.go_ident.name}_{go_name}'
        record = Record(md, sf, full_name, sf.ident(go_name), parent)
        self.messages[full_name] = record
        presence = _presence_feature(md.options, presence)

        for od in md.oneof_decl:
            record.oneofs.append(VariantGroup(od.name, go_camel_case(od.name)))
        synthetic = {f.oneof_index for f in md.field if f.proto3_optional}
        for fd in md.field:
            field = Field(fd, record, _presence_feature(fd.options, presence))
            if fd.HasField('oneof_index') and fd.oneof_index not in synthetic:
                field.oneof = record.oneofs[fd.oneof_index]
                field.oneof.fields.append(field)
            record.fields.append(field)

        for nested in md.nested_type:
            record.messages.append(
                self._add_message(nested, sf, f'{full_name}.{nested.name}', record, presence))
        for ed in md.enum_type:
            record.enums.append(self._add_enum(ed, sf, f'{full_name}.{ed.name}', record))
        self._resolve_go_names(record)
        return record

    def _add_enum(self, ed, sf, full_name, parent):
        go_name = go_camel_case(ed.name)
        if parent is not None:
            go_name = f'{parent.go_ident.name}_{go_name}'
        enum = Enumeration(ed, sf, full_name, sf.ident(go_name), parent)
        self.enums[full_name] = enum
        return enum

    def _resolve_go_names(self, record):
        # Field names must not shadow generated methods or each other's getters
        used = {name: False for name in GENERATED_METHODS}

        def make_unique(name, has_getter):
            while name in used or (has_getter and used.get('Get' + name)):
                name += '_'
            used[name] = True
            used['Get' + name] = has_getter
            return name

        seen_oneofs = set()
        for field in record.fields:
            field.go_name = make_unique(field.go_name, True)
            field.go_ident = record.file.ident(f'{record.go_ident.name}_{field.go_name}')
            if field.in_any_oneof and field.desc.oneof_index not in seen_oneofs:
                seen_oneofs.add(field.desc.oneof_index)
                group = record.oneofs[field.desc.oneof_index]
                group.go_name = make_unique(group.go_name, False)

        nested = {m.go_ident for m in record.messages} | {e.go_ident for e in record.enums}
        for field in record.fields:
            if field.oneof is None:
                continue
            while field.go_ident in nested:
                field.go_ident = record.file.ident(field.go_ident.name + '_')

    def _link_fields(self, record):
        for field in record.fields:
            if field.kind in (FDP.TYPE_MESSAGE, FDP.TYPE_GROUP):
                field.message = self.messages[field.type_name]
            elif field.kind == FDP.TYPE_ENUM:
                field.enum = self.enums[field.type_name]

    def lookup(self, name):
        """Return (message, enum) for a full name; either may be None."""
        name = name.lstrip('.')
        return self.messages.get(name), self.enums.get(name)
