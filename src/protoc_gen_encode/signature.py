"""
Structural type signatures of message fields.

Two fields are type-equal when their signatures are equal: same scalar kind
or referenced definition, same wrapping (list, map, optional or none). The
signature is what classification compares and what is rendered as a Go type.
"""
from google.protobuf import descriptor_pb2

FDP = descriptor_pb2.FieldDescriptorProto

# Protobuf scalar kinds collapse onto the Go type that carries them
SCALAR_KINDS = {
    FDP.TYPE_BOOL: 'bool',
    FDP.TYPE_INT32: 'int32', FDP.TYPE_SINT32: 'int32', FDP.TYPE_SFIXED32: 'int32',
    FDP.TYPE_UINT32: 'uint32', FDP.TYPE_FIXED32: 'uint32',
    FDP.TYPE_INT64: 'int64', FDP.TYPE_SINT64: 'int64', FDP.TYPE_SFIXED64: 'int64',
    FDP.TYPE_UINT64: 'uint64', FDP.TYPE_FIXED64: 'uint64',
    FDP.TYPE_FLOAT: 'float32',
    FDP.TYPE_DOUBLE: 'float64',
    FDP.TYPE_STRING: 'string',
    FDP.TYPE_BYTES: '[]byte',
}

LIST = 'list'
MAP = 'map'
OPTIONAL = 'optional'


class FieldType:
    """Structural signature of a field.

    kind is a Go scalar name, 'enum', 'message' or 'weak'; ref is the
    referenced Record/Enumeration for the latter two. wrapper is one of
    None, LIST, MAP or OPTIONAL; maps carry key and value signatures instead
    of a kind.
    """

    def __init__(self, kind=None, ref=None, wrapper=None, key=None, value=None):
        self.kind = kind
        self.ref = ref
        self.wrapper = wrapper
        self.key = key
        self.value = value

    def _key(self):
        return (
            self.kind,
            self.ref.full_name if self.ref is not None else None,
            self.wrapper,
            self.key._key() if self.key is not None else None,
            self.value._key() if self.value is not None else None,
        )

    def __eq__(self, other):
        return isinstance(other, FieldType) and self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        if self.wrapper == MAP:
            return f'map-of({self.key!r}, {self.value!r})'
        base = self.ref.full_name if self.ref is not None else self.kind
        if self.wrapper:
            return f'{self.wrapper}-of({base})'
        return base

    @property
    def optional(self):
        return self.wrapper == OPTIONAL


def _element_type(field):
    if field.kind == FDP.TYPE_ENUM:
        return FieldType('enum', field.enum)
    if field.kind in (FDP.TYPE_MESSAGE, FDP.TYPE_GROUP):
        return FieldType('message', field.message)
    return FieldType(SCALAR_KINDS[field.kind])


def field_type(field):
    """Derive the signature of a schema field."""
    if field.is_weak:
        return FieldType('weak')
    if field.is_map:
        # The entry message's fields are key then value, by position
        entry = field.message
        return FieldType(wrapper=MAP, key=_element_type(entry.fields[0]),
                         value=_element_type(entry.fields[1]))
    ft = _element_type(field)
    if field.is_list:
        ft.wrapper = LIST
    elif field.has_presence and ft.kind not in ('message', '[]byte'):
        # Message pointers and byte slices are nilable on their own
        ft.wrapper = OPTIONAL
    return ft


def type_equal(a, b):
    return field_type(a) == field_type(b)


def _go_element(g, ft):
    if ft.kind == 'weak':
        return 'struct{}'
    if ft.kind == 'enum':
        return g.qualified_go_ident(ft.ref.go_ident)
    if ft.kind == 'message':
        return '*' + g.qualified_go_ident(ft.ref.go_ident)
    return ft.kind


def go_type(g, ft):
    """Render a signature as Go source, qualifying references through g."""
    if ft.wrapper == MAP:
        return f'map[{_go_element(g, ft.key)}]{_go_element(g, ft.value)}'
    elem = _go_element(g, ft)
    if ft.wrapper == LIST:
        return '[]' + elem
    if ft.wrapper == OPTIONAL:
        return '*' + elem
    return elem


def field_go_type(g, field):
    return go_type(g, field_type(field))
