"""
Field and enum value classification.

Output fields are partitioned by Go name into common (same name, equal
signature), changed (same name, different signature) and extra (no input
counterpart); input fields absent from the output are missing. Enum values
are partitioned the same way by value name, without a changed category.
"""
from .signature import type_equal


class MessageClassification:
    def __init__(self, input_record, output_record):
        self.input = input_record
        self.output = output_record
        self.inputs = {}   # input fields by Go name
        self.outputs = {}  # output fields by Go name
        self.common = {}
        self.changed = {}
        self.extra = {}
        self.missing = {}

    def __repr__(self):
        return (f'MessageClassification(common={list(self.common)}, '
                f'changed={list(self.changed)}, extra={list(self.extra)}, '
                f'missing={list(self.missing)})')


class EnumClassification:
    def __init__(self, input_enum, output_enum):
        self.input = input_enum
        self.output = output_enum
        self.inputs = {}
        self.outputs = {}
        self.common = {}
        self.extra = {}
        self.missing = {}

    def __repr__(self):
        return (f'EnumClassification(common={list(self.common)}, '
                f'extra={list(self.extra)}, missing={list(self.missing)})')


def classify_message(input_record, output_record):
    """Partition output_record's fields against input_record's.

    common, changed and extra hold output fields; missing holds input fields.
    """
    c = MessageClassification(input_record, output_record)
    for field in input_record.fields:
        c.inputs[field.go_name] = field

    for field in output_record.fields:
        c.outputs[field.go_name] = field
        in_field = c.inputs.get(field.go_name)
        if in_field is None:
            c.extra[field.go_name] = field
        elif type_equal(in_field, field):
            c.common[field.go_name] = field
        else:
            c.changed[field.go_name] = field

    for field in input_record.fields:
        if field.go_name not in c.outputs:
            c.missing[field.go_name] = field
    return c


def classify_enum(input_enum, output_enum):
    c = EnumClassification(input_enum, output_enum)
    for value in input_enum.values:
        c.inputs[value.name] = value

    for value in output_enum.values:
        c.outputs[value.name] = value
        if value.name in c.inputs:
            c.common[value.name] = value
        else:
            c.extra[value.name] = value

    for value in input_enum.values:
        if value.name not in c.outputs:
            c.missing[value.name] = value
    return c
