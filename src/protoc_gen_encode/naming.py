"""
Identifier derivation for generated Go code.

Every synthesized name is a pure function of the qualified Go identifiers of
the schemas (and fields) involved, so repeated runs emit identical text.
"""
import re

# Go keywords and predeclared identifiers that must not be used as locals
GO_KEYWORDS = {
    'break', 'case', 'chan', 'const', 'continue', 'default', 'defer', 'else',
    'fallthrough', 'for', 'func', 'go', 'goto', 'if', 'import', 'interface',
    'map', 'package', 'range', 'return', 'select', 'struct', 'switch', 'type',
    'var', 'any', 'bool', 'byte', 'comparable', 'error', 'false', 'iota', 'nil',
    'rune', 'string', 'true', 'uintptr', 'int', 'int8', 'int16', 'int32',
    'int64', 'uint', 'uint8', 'uint16', 'uint32', 'uint64', 'float32',
    'float64', 'complex64', 'complex128', 'append', 'cap', 'clear', 'close',
    'complex', 'copy', 'delete', 'imag', 'len', 'make', 'max', 'min', 'new',
    'panic', 'print', 'println', 'real', 'recover',
}

# Names the generated Encode bodies already bind
ENCODE_LOCALS = {'e', 'in', 'out', 'err', 'extra', 't'}

# Names the generated constructors already bind
CONSTRUCTOR_RESERVED = {'T', 'extraEncoder'}

# Methods of generated protobuf messages; a field Go name may not shadow them
GENERATED_METHODS = {
    'Reset', 'String', 'ProtoMessage', 'Marshal', 'Unmarshal',
    'ExtensionRangeArray', 'ExtensionMap', 'Descriptor',
}


def upper_first(s):
    if not s:
        return s
    return s[0].upper() + s[1:]


def lower_first(s):
    if not s:
        return s
    return s[0].lower() + s[1:]


def go_camel_case(s):
    """Camel-case a protobuf name the way the Go protobuf generator does.

    '_' followed by a lower case letter is dropped and the letter upper-cased,
    a leading '_' becomes 'X', '.' before a lower case letter is dropped and
    any other '.' becomes '_'.
    """
    out = []
    i = 0
    n = len(s)
    while i < n:
        c = s[i]
        if c == '.' and i + 1 < n and s[i + 1].islower():
            pass
        elif c == '.':
            out.append('_')
        elif c == '_' and (i == 0 or s[i - 1] == '.'):
            out.append('X')
        elif c == '_' and i + 1 < n and s[i + 1].islower():
            pass
        elif c.isdigit():
            out.append(c)
        else:
            out.append(c.upper() if c.islower() else c)
            while i + 1 < n and s[i + 1].islower():
                i += 1
                out.append(s[i])
        i += 1
    return ''.join(out)


def clean_package_name(name):
    """Sanitize a string into a valid Go package name."""
    name = re.sub(r'[^A-Za-z0-9_]', '_', name)
    if not name or name[0].isdigit() or name in GO_KEYWORDS:
        name = '_' + name
    return name


def package_name_from_import_path(import_path):
    """The package name of a Go import path is its final segment."""
    return clean_package_name(import_path.rstrip('/').split('/')[-1])


def parse_go_package(value):
    """Split a go_package option ('path;name' or 'path') into (path, name)."""
    if ';' in value:
        path, name = value.split(';', 1)
        return path, name
    return value, package_name_from_import_path(value)


def safe_identifier(name, reserved=()):
    """Suffix '_' while name is a Go keyword or already taken."""
    while name in GO_KEYWORDS or name in reserved:
        name += '_'
    return name


def local_name(go_name):
    return safe_identifier(lower_first(go_name), ENCODE_LOCALS)


def unique_name(g, ident):
    """Qualified Go name with the package prefix folded in: pb.Foo -> PbFoo."""
    s = g.qualified_go_ident(ident)
    parts = s.split('.')
    if len(parts) < 2:
        return s
    return f"{upper_first(parts[0])}{parts[1]}"


def encoder_name(g, in_def, out_def):
    return f"{unique_name(g, in_def.go_ident)}To{unique_name(g, out_def.go_ident)}Encoder"


def extra_encoder_name(g, in_enum, out_enum):
    return f"Extra{upper_first(encoder_name(g, in_enum, out_enum))}"


def field_encoder_name(g, msg, field):
    return f"{unique_name(g, msg.go_ident)}{upper_first(field.go_name)}Encoder"


def ack_missing_name(g, msg, field):
    return f"{unique_name(g, msg.go_ident)}{upper_first(field.go_name)}AckMissing"


def ack_missing_enum_name(g, enum, value):
    return f"{unique_name(g, enum.go_ident)}{upper_first(value.go_ident.name)}AckMissing"
