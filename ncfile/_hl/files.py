"""
    Implements high-level support for file objects.

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
from contextlib import contextmanager
from typing import Union, List, Optional, Tuple, Type, Any, Sequence, FrozenSet
from types import TracebackType
from numpy import ndarray

import logging
import os

import numpy as np
import netCDF4

from .groups import GroupPath
from .render import render
from .types import ElementKind, INTEGER_KINDS, kind_of_value, storage_dtype, decode, format_value, dtypes_by_kind
from .variables import VariableRef, VariableInfo
from .. import config
from ..errors import NcFileError, NotFoundError, TypeMismatchError, DimensionError, ClosedFileError, library_errors
from ..utils.layout import row_major_to_col_major, col_major_to_row_major, check_buffer

logger = logging.getLogger(__name__)

Variable = Union[str, VariableRef]


class File:
    """
        Represents a netCDF file.
    """
    def __init__(self, file_path: Optional[str] = None, mode: str = 'r', format: str = config.DEFAULT_FORMAT):
        """
        Create a new file object, opening or creating the file when a path is given.
        :param file_path: path to the file on disk
        :param mode: "r" to read, "a" to append to an existing file, "w" to create a new file
        :param format: data model of a created file, one of config.FORMAT_NAMES
        """
        self._file_path: Optional[str] = None
        self._mode: Optional[str] = None
        self._dataset: Optional[netCDF4.Dataset] = None
        self._path: Optional[GroupPath] = None
        self._define_depth = 0

        if file_path is None:
            return
        if mode == 'w':
            self.create(file_path, format)
        else:
            self.open(file_path, mode)

    def open(self, file_path: str, mode: str = 'r'):
        """
        Open an existing file, closing the current one first.
        :param file_path: path to the file on disk
        :param mode: "r" (read only) or "a" (append)
        :return:
        """
        if mode not in ('r', 'a'):
            raise ValueError(f'Expected File opening mode to be "r" or "a", got {mode}.')

        self.close()

        if not os.path.exists(file_path):
            raise NotFoundError(f"File '{file_path}' does not exist", file_path)

        with library_errors():
            self._dataset = netCDF4.Dataset(file_path, mode)

        self._file_path = file_path
        self._mode = mode
        self._path = GroupPath(self._dataset)
        logger.info(f'Opened {file_path} ({self.data_model}) in "{mode}" mode')

    def create(self, file_path: str, format: str = config.DEFAULT_FORMAT):
        """
        Create a new file, overwriting any existing one, closing the current one first.
        :param file_path: path to the file on disk
        :param format: data model, one of config.FORMAT_NAMES
        :return:
        """
        if format not in config.FORMAT_NAMES:
            raise ValueError(f'Unknown format "{format}". Supported formats are: {", ".join(config.FORMAT_NAMES)}')

        self.close()

        with library_errors():
            self._dataset = netCDF4.Dataset(file_path, 'w', clobber=True, format=format)

        self._file_path = file_path
        self._mode = 'w'
        self._path = GroupPath(self._dataset)
        logger.info(f'Created {file_path} ({format})')

    def __enter__(self):
        """
        Return File object when using a "with" statement.
        :return: File object
        """
        return self

    def __exit__(self, exception_type: Optional[Type[BaseException]], exception_value: Optional[BaseException],
                 traceback: Optional[TracebackType]):
        """
        Explicitly close the File when exiting a "with" context.
        :param exception_type: type of exception
        :param exception_value: value of exception
        :param traceback: traceback
        :return:
        """
        self.close()

    def __del__(self):
        if getattr(self, '_dataset', None) is not None:
            try:
                self.close()
            except NcFileError as e:
                logger.warning(f"Could not close {self._file_path}: {e}")

    def close(self):
        """
        Close the file, does nothing if it is not open.
        :return:
        """
        if self._dataset is None:
            return

        dataset, self._dataset = self._dataset, None
        self._path = None
        self._define_depth = 0

        if not dataset.isopen():
            return
        with library_errors():
            dataset.close()
        logger.info(f'Closed {self._file_path}')

    def is_open(self) -> bool:
        return self._dataset is not None and self._dataset.isopen()

    def validate_file_handle(self, mode: str = 'r'):
        if mode == 'r':
            message = 'Trying to read from'
        elif mode == 'w':
            message = 'Trying to write to'
        else:
            raise ValueError(f'Unknown mode "{mode}"')

        if self._dataset is None:
            raise ClosedFileError(f'{message} a non initialized file.')
        if not self._dataset.isopen():
            raise ClosedFileError(f'{message} a closed file.')
        if mode == 'w' and self._mode == 'r':
            raise ClosedFileError(f'File is expected to be opened in a writable mode, got "{self._mode}".')

    @property
    def file_path(self) -> Optional[str]:
        return self._file_path

    @property
    def mode(self) -> Optional[str]:
        return self._mode

    @property
    def data_model(self) -> str:
        self.validate_file_handle('r')
        return self._dataset.data_model

    @property
    def is_hierarchical(self) -> bool:
        return self.data_model in config.HIERARCHICAL_FORMATS

    def get_file_format(self) -> str:
        """
        Get the human readable name of the file format.
        :return: format name
        """
        data_model = self.data_model
        return config.FORMAT_NAMES.get(data_model, f'Unknown format {data_model}')

    @contextmanager
    def define(self):
        """
        Scope of a structural change (new dimensions, variables, attributes or groups).
        Nested scopes join the outermost one, which commits the definitions to disk on exit.
        :return:
        """
        self.validate_file_handle('w')

        self._define_depth += 1
        try:
            yield self
        finally:
            self._define_depth -= 1
            if self._define_depth == 0 and self.is_open():
                with library_errors():
                    self._dataset.sync()

    def sync(self):
        self.validate_file_handle('w')
        with library_errors():
            self._dataset.sync()

    # Attributes

    def _attribute_scope(self, variable: Optional[Variable]):
        if variable is None:
            self.validate_file_handle('r')
            return self._path.current

        return self._resolve(variable).variable

    def _read_attribute(self, name: str, variable: Optional[Variable]) -> Tuple[ElementKind, Any]:
        scope = self._attribute_scope(variable)

        with library_errors():
            if name not in scope.ncattrs():
                raise NotFoundError(f"Attribute '{name}' not found", name)
            value = scope.getncattr(name)

        return kind_of_value(value), value

    def list_attributes(self, variable: Optional[Variable] = None) -> List[str]:
        """
        List the attribute names of a variable, or of the current group.
        :param variable: variable name or handle, None for the current group
        :return: attribute names in the order they were defined
        """
        scope = self._attribute_scope(variable)

        with library_errors():
            return list(scope.ncattrs())

    def list_global_attributes(self) -> List[str]:
        return self.list_attributes()

    def get_attribute_type(self, name: str, variable: Optional[Variable] = None) -> ElementKind:
        kind, _ = self._read_attribute(name, variable)
        return kind

    def get_attribute(self, name: str, variable: Optional[Variable] = None) -> Any:
        """
        Get an attribute of a variable, or of the current group.
        :param name: attribute name
        :param variable: variable name or handle, None for the current group
        :return: str, int or float, or the type name if the attribute type is not supported
        """
        kind, value = self._read_attribute(name, variable)
        return decode(kind, value)

    def _get_typed_attribute(self, name: str, variable: Optional[Variable], expected: ElementKind,
                             accepted: FrozenSet[ElementKind] = frozenset()) -> Any:
        kind, value = self._read_attribute(name, variable)
        if kind != expected and kind not in accepted:
            raise TypeMismatchError(expected, kind)

        return decode(kind, value)

    def get_attribute_int(self, name: str, variable: Optional[Variable] = None) -> int:
        return self._get_typed_attribute(name, variable, ElementKind.INT, INTEGER_KINDS)

    def get_attribute_float(self, name: str, variable: Optional[Variable] = None) -> float:
        return self._get_typed_attribute(name, variable, ElementKind.FLOAT)

    def get_attribute_double(self, name: str, variable: Optional[Variable] = None) -> float:
        return self._get_typed_attribute(name, variable, ElementKind.DOUBLE)

    def get_attribute_string(self, name: str, variable: Optional[Variable] = None) -> str:
        return self._get_typed_attribute(name, variable, ElementKind.TEXT)

    def get_attribute_as_string(self, name: str, variable: Optional[Variable] = None) -> str:
        kind, value = self._read_attribute(name, variable)
        return format_value(kind, value, config.VALUE_SEPARATOR)

    @staticmethod
    def _attribute_value(value: Any) -> Any:
        if isinstance(value, str):
            return value
        if isinstance(value, (bool, np.bool_)):
            raise TypeError('Boolean attributes are not supported.')
        if isinstance(value, int):
            return storage_dtype(np.dtype('int64'), value).type(value)
        if isinstance(value, float):
            return np.float64(value)
        if isinstance(value, np.generic):
            return value.astype(storage_dtype(value.dtype, value))

        raise TypeError(f'Expected attribute value to be int, float or str, got {type(value)}.')

    def set_attribute(self, name: str, value: Any, variable: Optional[Variable] = None) -> 'File':
        """
        Write an attribute of a variable, or of the current group.
        :param name: attribute name
        :param value: int (NC_INT), float (NC_DOUBLE) or str (NC_CHAR)
        :param variable: variable name or handle, None for the current group
        :return: the File object, for chaining
        """
        self.validate_file_handle('w')

        value = self._attribute_value(value)
        scope = self._attribute_scope(variable)

        with self.define(), library_errors():
            scope.setncattr(name, value)
        logger.debug(f'Set attribute {name} of {variable or self.current_group}')

        return self

    # Variables

    def list_variables(self) -> List[str]:
        """
        List the variable names of the current group.
        :return: variable names in the order they were defined
        """
        self.validate_file_handle('r')
        return list(self._path.current.variables.keys())

    def list_dimensions(self) -> List[Tuple[str, int]]:
        """
        List the dimensions of the current group.
        :return: (name, size) pairs
        """
        self.validate_file_handle('r')

        with library_errors():
            return [(name, len(dimension)) for name, dimension in self._path.current.dimensions.items()]

    def has_variable(self, name: str) -> bool:
        self.validate_file_handle('r')
        return name in self._path.current.variables

    def get_variable(self, name: str) -> VariableRef:
        """
        Resolve a variable by name in the current group.
        :param name: variable name
        :return: handle on the variable
        """
        self.validate_file_handle('r')

        variables = self._path.current.variables
        if name not in variables:
            raise NotFoundError(f"Variable '{name}' not found in group '{self._path}'", name)

        return VariableRef(self, str(self._path), variables[name])

    def _resolve(self, variable: Variable) -> VariableRef:
        if isinstance(variable, VariableRef):
            if variable.file is not self:
                raise ValueError(f'Variable {variable.name} belongs to another file.')
            self.validate_file_handle('r')
            return variable

        return self.get_variable(variable)

    def describe_variable(self, variable: Variable, collapse_strings: bool = True) -> VariableInfo:
        """
        Get the element kind and extents of a variable.
        :param variable: variable name or handle
        :param collapse_strings: describe character variables as a string (no dimension)
            or an array of strings (one dimension)
        :return: variable description
        """
        return self._resolve(variable).describe(collapse_strings)

    def _read(self, variable: Variable, expected: ElementKind, rank: int, getter: str) -> ndarray:
        """
        Read a variable after checking its element kind and number of dimensions.
        :param variable: variable name or handle
        :param expected: element kind requested by the caller
        :param rank: number of dimensions requested by the caller, character dimensions excluded
        :param getter: name of the calling getter, for error messages
        :return: raw data in row-major order
        """
        ref = self._resolve(variable)
        info = ref.describe()

        if info.kind != expected:
            raise TypeMismatchError(expected, info.kind)
        if info.rank != rank:
            raise DimensionError(rank, info.rank, getter)

        return ref.read()

    def get_int(self, variable: Variable) -> int:
        return self._read(variable, ElementKind.INT, 0, 'get_int').item()

    def get_float(self, variable: Variable) -> float:
        return self._read(variable, ElementKind.FLOAT, 0, 'get_float').item()

    def get_double(self, variable: Variable) -> float:
        return self._read(variable, ElementKind.DOUBLE, 0, 'get_double').item()

    def get_string(self, variable: Variable) -> str:
        data = self._read(variable, ElementKind.TEXT, 0, 'get_string')
        return str(netCDF4.chartostring(data))

    def get_int_vector(self, variable: Variable) -> ndarray:
        return self._read(variable, ElementKind.INT, 1, 'get_int_vector')

    def get_float_vector(self, variable: Variable) -> ndarray:
        return self._read(variable, ElementKind.FLOAT, 1, 'get_float_vector')

    def get_double_vector(self, variable: Variable) -> ndarray:
        return self._read(variable, ElementKind.DOUBLE, 1, 'get_double_vector')

    def get_string_vector(self, variable: Variable) -> List[str]:
        data = self._read(variable, ElementKind.TEXT, 1, 'get_string_vector')
        return [str(string) for string in netCDF4.chartostring(data)]

    def get_double_matrix(self, variable: Variable, order: str = 'C') -> ndarray:
        """
        Read a 2-D double variable.
        :param variable: variable name or handle
        :param order: memory layout of the result, "C" (row-major) or "F" (column-major)
        :return: array of shape (rows, columns)
        """
        data = self._read(variable, ElementKind.DOUBLE, 2, 'get_double_matrix')
        return self._to_order(data, order)

    def get_double_tensor(self, variable: Variable, rank: int, order: str = 'C') -> ndarray:
        """
        Read an N-D double variable.
        :param variable: variable name or handle
        :param rank: expected number of dimensions
        :param order: memory layout of the result, "C" (row-major) or "F" (column-major)
        :return: array with the shape of the variable
        """
        data = self._read(variable, ElementKind.DOUBLE, rank, 'get_double_tensor')
        return self._to_order(data, order)

    def get_buffer(self, variable: Variable, order: str = 'C') -> Tuple[ndarray, Tuple[int, ...]]:
        """
        Read a double variable of any rank as a flat buffer.
        :param variable: variable name or handle
        :param order: memory order of the buffer, "C" (row-major) or "F" (column-major)
        :return: flat buffer and extents of each axis
        """
        ref = self._resolve(variable)
        info = ref.describe()
        if info.kind != ElementKind.DOUBLE:
            raise TypeMismatchError(ElementKind.DOUBLE, info.kind)

        data = ref.read()
        return self._to_order(data, order).ravel(order='K'), info.dims

    @staticmethod
    def _to_order(data: ndarray, order: str) -> ndarray:
        if order == 'C':
            return np.ascontiguousarray(data)
        if order == 'F':
            flat = row_major_to_col_major(data.ravel(order='C'), data.shape)
            return flat.reshape(data.shape, order='F')

        raise ValueError(f'Expected order to be "C" or "F", got {order}.')

    def get_variable_string(self, variable: Variable) -> str:
        """
        Render the value of a variable as text.
        Multi-valued data is flattened in row-major order and joined with config.VALUE_SEPARATOR.
        :param variable: variable name or handle
        :return: text, or the type name if the variable type is not supported
        """
        ref = self._resolve(variable)
        info = ref.describe()

        if not info.kind.supported:
            return info.kind.nc_name

        data = ref.read()
        if info.kind == ElementKind.TEXT:
            if info.rank == 0:
                return str(netCDF4.chartostring(data))
            return config.VALUE_SEPARATOR.join(str(string) for string in netCDF4.chartostring(data).ravel())

        return format_value(info.kind, data, config.VALUE_SEPARATOR)

    def _define_variable(self, name: str, data: ndarray) -> VariableRef:
        """
        Declare one dimension per axis and the variable, then write its data.
        A failure after the dimensions are declared leaves them in the file.
        :param name: variable name
        :param data: row-major data in its storage type
        :return: handle on the new variable
        """
        group = self._path.current

        with self.define(), library_errors():
            dimensions = []
            for axis, size in enumerate(data.shape):
                dimension = config.DIMENSION_NAME_FORMAT.format(variable=name, axis=axis)
                group.createDimension(dimension, size)
                dimensions.append(dimension)

            nc_variable = group.createVariable(name, data.dtype, tuple(dimensions))
            nc_variable.set_auto_chartostring(False)
            nc_variable[...] = data

        logger.debug(f'Defined variable {name} {data.dtype}{data.shape} in {self._path}')

        return VariableRef(self, str(self._path), nc_variable)

    @staticmethod
    def _encode_strings(strings: Sequence[str]) -> ndarray:
        """
        Convert strings to a 2-D character array padded to the longest string.
        :param strings: strings to convert
        :return: array of shape (len(strings), max length) of single bytes
        """
        encoded = [string.encode('utf-8') for string in strings]
        length = max([len(string) for string in encoded] + [1])

        return np.array(encoded, dtype=f'S{length}').view('S1').reshape(len(encoded), length)

    def set(self, name: str, value: Any) -> VariableRef:
        """
        Write a new variable in the current group.
        int values are stored as NC_INT, float values as NC_DOUBLE, str values as NC_CHAR,
        sequences of str as 2-D NC_CHAR, vectors keep their type (int32, float32 or float64),
        numeric matrices and N-D arrays are stored as NC_DOUBLE.
        Column-major arrays are converted to the row-major storage order.
        :param name: variable name
        :param value: scalar, string, sequence of strings or array
        :return: handle on the new variable
        """
        self.validate_file_handle('w')

        if isinstance(value, str):
            return self._define_variable(name, self._encode_strings([value])[0])
        if isinstance(value, (list, tuple)) and value and all(isinstance(string, str) for string in value):
            return self._define_variable(name, self._encode_strings(value))
        if isinstance(value, (bool, np.bool_)):
            raise TypeError('Boolean variables are not supported.')
        if isinstance(value, int):
            return self._define_variable(name, np.array(value, dtype=storage_dtype(np.dtype('int64'), value)))
        if isinstance(value, float):
            return self._define_variable(name, np.array(value, dtype=dtypes_by_kind[ElementKind.DOUBLE]))

        array = np.asarray(value)
        if array.dtype.kind == 'U' and array.ndim == 1:
            return self._define_variable(name, self._encode_strings(array.tolist()))
        if array.ndim > 0 and array.size == 0:
            raise ValueError(f'Variable {name} is empty.')

        if array.ndim > 1 and array.dtype.kind in 'iuf':
            data_type = dtypes_by_kind[ElementKind.DOUBLE]
        else:
            data_type = storage_dtype(array.dtype, array)
        if array.ndim > 1 and array.flags.f_contiguous and not array.flags.c_contiguous:
            flat = col_major_to_row_major(array.ravel(order='F'), array.shape)
            array = flat.reshape(array.shape)

        return self._define_variable(name, np.ascontiguousarray(array, dtype=data_type))

    def set_buffer(self, name: str, flat: Sequence[float], shape: Sequence[int], order: str = 'C') -> VariableRef:
        """
        Write a new double variable from a flat buffer.
        :param name: variable name
        :param flat: flat buffer
        :param shape: extents of each axis
        :param order: memory order of the buffer, "C" (row-major) or "F" (column-major)
        :return: handle on the new variable
        """
        self.validate_file_handle('w')

        flat = np.asarray(flat, dtype=dtypes_by_kind[ElementKind.DOUBLE])
        if order == 'C':
            flat = check_buffer(flat, shape)
        elif order == 'F':
            flat = col_major_to_row_major(flat, shape)
        else:
            raise ValueError(f'Expected order to be "C" or "F", got {order}.')
        if flat.size == 0:
            raise ValueError(f'Variable {name} is empty.')

        return self._define_variable(name, flat.reshape(tuple(shape)))

    # Groups

    @property
    def current_group(self) -> str:
        self.validate_file_handle('r')
        return str(self._path)

    @property
    def group_path(self) -> Tuple[str, ...]:
        self.validate_file_handle('r')
        return self._path.names()

    def list_groups(self) -> List[str]:
        """
        List the groups of the current group.
        :return: group names, always empty for formats without groups
        """
        if not self.is_hierarchical:
            return []

        with library_errors():
            return list(self._path.current.groups.keys())

    def change_group_root(self):
        self.validate_file_handle('r')
        self._path.reset()

    def change_group(self, name: str) -> bool:
        """
        Move into a group of the current group.
        :param name: group name
        :return: False for formats without groups, True otherwise
        """
        if not self.is_hierarchical:
            return False

        groups = self._path.current.groups
        if name not in groups:
            raise NotFoundError(f"Group '{name}' not found in '{self._path}'", name)

        self._path.enter(groups[name])
        logger.debug(f'Moved to group {self._path}')
        return True

    def change_group_up(self) -> bool:
        """
        Move to the parent group, does nothing at the root.
        :return: True if the current group changed
        """
        self.validate_file_handle('r')
        return self._path.up()

    def create_group(self, name: str, change: bool = False) -> bool:
        """
        Create a group in the current group.
        :param name: group name
        :param change: move into the new group
        :return: False for formats without groups, True otherwise
        """
        self.validate_file_handle('w')
        if not self.is_hierarchical:
            return False

        with self.define(), library_errors():
            group = self._path.current.createGroup(name)
        logger.debug(f'Created group {name} in {self._path}')

        if change:
            self._path.enter(group)
        return True

    @contextmanager
    def preserve_location(self):
        """
        Restore the current group when leaving the scope.
        :return:
        """
        self.validate_file_handle('r')

        location = self._path.snapshot()
        try:
            yield self
        finally:
            if self._path is not None:
                self._path.restore(location)

    def to_string(self) -> str:
        """
        Render the whole file as text.
        :return: description of the format, attributes, variables and groups
        """
        return render(self)

    def __str__(self):
        if not self.is_open():
            return repr(self)
        return self.to_string()

    def __repr__(self):
        state = 'open' if self.is_open() else 'closed'
        return f'<ncfile.File "{self._file_path}" ({state})>'

