"""
    Implements the diagnostic rendering of a whole file as text.

    This file is part of NcFile.

    NcFile is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.

    NcFile is distributed in the hope that it will be useful,
    but WITHOUT ANY WARRANTY; without even the implied warranty of
    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
    GNU General Public License for more details.

    You should have received a copy of the GNU General Public License
    along with NcFile.  If not, see <https://www.gnu.org/licenses/>.
"""
from typing import List

from .. import config


def render(file) -> str:
    """
    Render the format, attributes, variables and groups of a file, starting from the root group.
    The current group of the file is left unchanged.
    :param file: open File object
    :return: text description
    """
    lines = [f'Format: {file.get_file_format()}']

    with file.preserve_location():
        file.change_group_root()
        _render_group(file, lines, 0)

    return '\n'.join(lines)


def _render_attribute(file, lines: List[str], indent: str, name: str, variable=None):
    kind = file.get_attribute_type(name, variable)
    lines.append(f'{indent}>{name} ({kind.nc_name}): {file.get_attribute_as_string(name, variable)}')


def _render_group(file, lines: List[str], depth: int):
    indent = config.INDENT * depth

    dimensions = file.list_dimensions()
    lines.append('')
    lines.append(f'{indent}Dimensions ({len(dimensions)}):')
    for name, size in dimensions:
        lines.append(f'{indent}>{name}: {size}')

    attributes = file.list_global_attributes()
    lines.append('')
    lines.append(f'{indent}{"Global attributes" if depth == 0 else "Attributes"} ({len(attributes)}):')
    for name in attributes:
        _render_attribute(file, lines, indent, name)

    variables = file.list_variables()
    lines.append('')
    lines.append(f'{indent}Variables ({len(variables)}):')
    for name in variables:
        variable = file.get_variable(name)
        info = variable.describe()
        shape = f'({",".join(str(size) for size in info.dims)})' if info.dims else ''
        lines.append(f'{indent}>{name} ({info.kind.nc_name}){shape}: {file.get_variable_string(variable)}')
        for attribute in variable.list_attributes():
            _render_attribute(file, lines, indent + config.INDENT, attribute, variable)

    if not file.is_hierarchical:
        return

    groups = file.list_groups()
    lines.append('')
    lines.append(f'{indent}Groups ({len(groups)}):')
    for name in groups:
        lines.append(f'{indent}>{name}')
        file.change_group(name)
        try:
            _render_group(file, lines, depth + 1)
        finally:
            file.change_group_up()
