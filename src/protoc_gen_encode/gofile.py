"""
The emitted Go source unit.

GeneratedFile owns the append-only body, tracks which packages the body
references and renders the final text: header, package clause, imports,
then the body indented by brace depth.
"""
from .errors import GoPackageError
from .naming import package_name_from_import_path

HEADER = '// Code generated by protoc-gen-encode. DO NOT EDIT.'


class GeneratedFile:
    def __init__(self, filename, go_import_path):
        self.filename = filename
        self.go_import_path = go_import_path
        self.package_name = package_name_from_import_path(go_import_path)
        self.imports = {}  # import path -> local package name
        self.lines = []

    def qualified_go_ident(self, ident):
        """Go expression naming ident from inside this file.

        Identifiers from other import paths are package-qualified and the
        import is recorded.
        """
        if ident.import_path is None:
            raise GoPackageError(
                f'unable to determine Go import path for "{ident.source}": '
                f'set the go_package option or pass M{ident.source}=<import path>')
        if ident.import_path == self.go_import_path:
            return ident.name
        return f'{self._import(ident.import_path, ident.package_name)}.{ident.name}'

    def _import(self, import_path, package_name):
        if import_path in self.imports:
            return self.imports[import_path]
        taken = set(self.imports.values())
        name = package_name
        i = 1
        while name in taken:
            name = f'{package_name}{i}'
            i += 1
        self.imports[import_path] = name
        return name

    def extend(self, lines):
        self.lines.extend(lines)

    def content(self):
        out = [HEADER, '', f'package {self.package_name}', '']
        if self.imports:
            out.append('import (')
            for path in sorted(self.imports):
                out.append(f'\t{self.imports[path]} "{path}"')
            out.append(')')
            out.append('')
        out.extend(indent(self.lines))
        while out and out[-1] == '':
            out.pop()
        return '\n'.join(out) + '\n'


def indent(lines):
    """Indent Go lines with tabs by brace and paren nesting."""
    depth = 0
    out = []
    for line in lines:
        line = line.strip()
        if not line:
            out.append('')
            continue
        if line[0] in '})':
            depth = max(depth - 1, 0)
        out.append('\t' * depth + line)
        if line[-1] in '{(':
            depth += 1
    return out
