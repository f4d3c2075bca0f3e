"""
Go synthesis for message and enum encoders.

Each synthesizer takes the target GeneratedFile only to qualify identifiers
and returns the declaration lines for one (input, output) pair; the driver
appends them to the file.
"""
from . import naming
from .classify import classify_enum, classify_message
from .signature import field_go_type, field_type


class Fragment:
    """Lines of Go source for one directive."""

    def __init__(self):
        self.lines = []

    def p(self, *parts):
        self.lines.append(''.join(str(x) for x in parts))


def _return_on_error(p, zero='nil'):
    p('if err != nil {')
    p('return ', zero, ', err')
    p('}')


def _declare_field_types(g, p, c):
    out_msg = c.output
    for field in c.input.fields:
        if field.go_name in c.changed:
            in_type = field_go_type(g, field)
            out_type = field_go_type(g, c.changed[field.go_name])
            p('type ', naming.field_encoder_name(g, out_msg, field),
              '[T any] func(', in_type, ', T) (', out_type, ', error)')
            p()
        if field.go_name in c.missing:
            p('type ', naming.ack_missing_name(g, out_msg, field), ' struct{}')
            p()

    for field in out_msg.fields:
        if field.go_name in c.extra:
            p('type ', naming.field_encoder_name(g, out_msg, field),
              '[T any] func(T) (', field_go_type(g, field), ', error)')
            p()


def _declare_encoder(g, p, c, encoder):
    out_msg = c.output
    p('type ', encoder, '[T any] struct {')
    for field in c.input.fields:
        if field.go_name in c.changed:
            p(field.go_name, ' ', naming.field_encoder_name(g, out_msg, field), '[T]')
        elif field.go_name in c.common:
            go_type = field_go_type(g, field)
            p(field.go_name, ' func(', go_type, ', T) (', go_type, ', error)')
    for field in out_msg.fields:
        if field.go_name in c.extra:
            p(field.go_name, ' ', naming.field_encoder_name(g, out_msg, field), '[T]')
    p('}')
    p()


def _declare_constructor(g, p, c, encoder):
    out_msg = c.output

    def param(field):
        return naming.safe_identifier(field.go_name, naming.CONSTRUCTOR_RESERVED)

    p('func New', encoder, '[T any](')
    for field in c.input.fields:
        if field.go_name in c.changed:
            p(param(field), ' ', naming.field_encoder_name(g, out_msg, field), '[T],')
        if field.go_name in c.missing:
            p(param(field), ' ', naming.ack_missing_name(g, out_msg, field), ',')
    for field in out_msg.fields:
        if field.go_name in c.extra:
            p(param(field), ' ', naming.field_encoder_name(g, out_msg, field), '[T],')
    p(') *', encoder, '[T] {')

    p('return &', encoder, '[T]{')
    for field in out_msg.fields:
        if field.go_name in c.common:
            go_type = field_go_type(g, field)
            p(field.go_name, ': func(in ', go_type, ', extra T) (', go_type,
              ', error) { return in, nil },')
        elif field.go_name in c.changed or field.go_name in c.extra:
            p(field.go_name, ': ', param(field), ',')
    p('}')
    p('}')
    p()


def _extract_oneof_input(g, p, field, local):
    """Bind <local>In to the field's value, or its zero value when another
    alternative of the group is set."""
    addr = '&' if field_type(field).optional else ''
    p('var ', local, 'In ', field_go_type(g, field))
    p('if in.', field.oneof.go_name, ' != nil {')
    p('if t, ok := in.', field.oneof.go_name, '.(*', g.qualified_go_ident(field.go_ident), '); ok {')
    p(local, 'In = ', addr, 't.', field.go_name)
    p('}')
    p('}')
    return f'{local}In'


def _assign_output(g, p, field, local, call):
    if field.oneof is None:
        p('out.', field.go_name, ', err = ', call)
        _return_on_error(p)
        return
    # A nil result leaves the group to the other alternatives
    deref = '*' if field_type(field).optional else ''
    p(local, ', err := ', call)
    _return_on_error(p)
    p('if ', local, ' != nil {')
    p('out.', field.oneof.go_name, ' = &', g.qualified_go_ident(field.go_ident), '{')
    p(field.go_name, ': ', deref, local, ',')
    p('}')
    p('}')


def _declare_encode(g, p, c, encoder):
    in_ident = g.qualified_go_ident(c.input.go_ident)
    out_ident = g.qualified_go_ident(c.output.go_ident)
    p('func (e *', encoder, '[T]) Encode(in *', in_ident, ', extra T) (*', out_ident, ', error) {')
    if c.output.fields:
        p('var err error')
    # Oneof wrappers are unexported interfaces, so out is filled in place
    p('out := &', out_ident, '{}')
    p()

    for out_field in c.output.fields:
        name = out_field.go_name
        local = naming.local_name(name)
        in_field = c.inputs.get(name)
        if in_field is None:
            call = f'e.{name}(extra)'
        elif in_field.oneof is None:
            call = f'e.{name}(in.{name}, extra)'
        else:
            arg = _extract_oneof_input(g, p, in_field, local)
            call = f'e.{name}({arg}, extra)'
        _assign_output(g, p, out_field, local, call)
        p()

    p('return out, nil')
    p('}')
    p()


def synthesize_message(g, input_record, output_record, classification=None):
    """Emit the encoder declarations converting input_record to output_record."""
    c = classification or classify_message(input_record, output_record)
    frag = Fragment()
    encoder = naming.encoder_name(g, input_record, output_record)
    _declare_field_types(g, frag.p, c)
    _declare_encoder(g, frag.p, c, encoder)
    _declare_constructor(g, frag.p, c, encoder)
    _declare_encode(g, frag.p, c, encoder)
    return frag.lines


def synthesize_enum(g, input_enum, output_enum, classification=None):
    """Emit the encoder declarations converting input_enum to output_enum.

    Common values map 1:1; missing values need an acknowledgment each; extra
    values are reachable only through the single ExtraEncoder override, which
    runs after the 1:1 ladder and wins when it returns non-nil.
    """
    c = classification or classify_enum(input_enum, output_enum)
    frag = Fragment()
    p = frag.p
    encoder = naming.encoder_name(g, input_enum, output_enum)
    extra_type = naming.extra_encoder_name(g, input_enum, output_enum)
    in_ident = g.qualified_go_ident(input_enum.go_ident)
    out_ident = g.qualified_go_ident(output_enum.go_ident)

    for value in input_enum.values:
        if value.name in c.missing:
            p('type ', naming.ack_missing_enum_name(g, output_enum, value), ' struct{}')
            p()

    p('type ', extra_type, '[T any] func(T) (*', out_ident, ', error)')
    p()
    p('type ', encoder, '[T any] struct {')
    p('ExtraEncoder ', extra_type, '[T]')
    p('}')
    p()

    reserved = naming.CONSTRUCTOR_RESERVED
    p('func New', encoder, '[T any](')
    p('extraEncoder ', extra_type, '[T],')
    for value in input_enum.values:
        if value.name in c.missing:
            p(naming.safe_identifier(value.name, reserved), ' ',
              naming.ack_missing_enum_name(g, output_enum, value), ',')
    p(') *', encoder, '[T] {')
    p('return &', encoder, '[T]{')
    p('ExtraEncoder: extraEncoder,')
    p('}')
    p('}')
    p()

    p('func (e *', encoder, '[T]) Encode(in ', in_ident, ', extra T) (', out_ident, ', error) {')
    p('var err error')
    p('var out ', out_ident)
    for value in output_enum.values:
        in_value = c.inputs.get(value.name)
        if in_value is not None:
            p('if in == ', g.qualified_go_ident(in_value.go_ident), ' {')
            p('out = ', g.qualified_go_ident(value.go_ident))
            p('}')
            p()

    p('var extraOut *', out_ident)
    p('extraOut, err = e.ExtraEncoder(extra)')
    _return_on_error(p, zero='0')
    p()
    p('if extraOut != nil {')
    p('out = *extraOut')
    p('}')
    p()
    p('return out, nil')
    p('}')
    p()
    return frag.lines
