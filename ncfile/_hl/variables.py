"""
    Implements explicit handles on the variables of a file.

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
from typing import Any, List, NamedTuple, Tuple
from numpy import ndarray

import numpy as np
import netCDF4

from .types import ElementKind, kind_of_datatype
from ..errors import library_errors


class VariableInfo(NamedTuple):
    """
        Element kind and extents of a variable.
    """
    name: str
    kind: ElementKind
    dims: Tuple[int, ...]

    @property
    def rank(self) -> int:
        return len(self.dims)


class VariableRef:
    """
        Handle on a variable resolved by name in a group of a file.
    """
    def __init__(self, file, group_path: str, variable: netCDF4.Variable):
        """
        Create a new handle.
        :param file: File object owning the variable
        :param group_path: path of the group holding the variable
        :param variable: netCDF4 variable
        """
        self.file = file
        self.group_path = group_path
        self.variable = variable

    @property
    def name(self) -> str:
        return self.variable.name

    def __repr__(self):
        return f'<VariableRef "{self.name}" in "{self.group_path}">'

    def describe(self, collapse_strings: bool = True) -> VariableInfo:
        """
        Get the element kind and extents of the variable.
        Character variables of one or two dimensions are described as a string or an array of strings,
        the last dimension being the length of the strings.
        :param collapse_strings: describe character variables as strings
        :return: variable description
        """
        with library_errors():
            kind = kind_of_datatype(self.variable.datatype)
            dims = tuple(int(size) for size in self.variable.shape)

        if collapse_strings and kind == ElementKind.TEXT and len(dims) in (1, 2):
            dims = dims[:-1]

        return VariableInfo(self.name, kind, dims)

    def read(self) -> ndarray:
        """
        Read the raw content of the variable in row-major order.
        Character data is returned as an array of single bytes.
        :return: array with the shape of the variable
        """
        self.file.validate_file_handle('r')

        with library_errors():
            self.variable.set_auto_mask(False)
            self.variable.set_auto_chartostring(False)
            return np.asarray(self.variable[...])

    def get_attribute(self, name: str) -> Any:
        return self.file.get_attribute(name, self)

    def get_attribute_type(self, name: str) -> ElementKind:
        return self.file.get_attribute_type(name, self)

    def set_attribute(self, name: str, value: Any) -> 'VariableRef':
        """
        Write an attribute of the variable.
        :param name: attribute name
        :param value: int, float or str value
        :return: the handle, for chaining
        """
        self.file.set_attribute(name, value, self)
        return self

    def list_attributes(self) -> List[str]:
        return self.file.list_attributes(self)
