"""
    Implements the element kinds stored in netCDF files and their decoders.

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
from enum import Enum
from typing import Any, Callable, Dict

import numpy as np
import netCDF4


class ElementKind(Enum):
    """
        Element type of a variable or an attribute, as named by the netCDF library.
    """
    TEXT = ('NC_CHAR', 'char')
    BYTE = ('NC_BYTE', 'byte')
    SHORT = ('NC_SHORT', 'short')
    INT = ('NC_INT', 'int')
    FLOAT = ('NC_FLOAT', 'float')
    DOUBLE = ('NC_DOUBLE', 'double')
    UBYTE = ('NC_UBYTE', 'unsigned byte')
    USHORT = ('NC_USHORT', 'unsigned short')
    UINT = ('NC_UINT', 'unsigned int')
    INT64 = ('NC_INT64', 'int64')
    UINT64 = ('NC_UINT64', 'unsigned int64')
    STRING = ('NC_STRING', 'string')
    VLEN = ('NC_VLEN', 'variable length')
    OPAQUE = ('NC_OPAQUE', 'opaque')
    ENUM = ('NC_ENUM', 'enum')
    COMPOUND = ('NC_COMPOUND', 'compound')
    UNKNOWN = ('NC_NAT', 'unknown')

    def __init__(self, nc_name: str, label: str):
        self.nc_name = nc_name
        self.label = label

    @property
    def supported(self) -> bool:
        return self in decoders and decoders[self] is not _placeholder

    def __str__(self):
        return self.nc_name


"""
Kinds read through the integer decoder
"""
INTEGER_KINDS = frozenset([ElementKind.BYTE, ElementKind.SHORT, ElementKind.INT])

"""
Kinds read through the floating point decoder
"""
REAL_KINDS = frozenset([ElementKind.FLOAT, ElementKind.DOUBLE])

"""
Element kinds by numpy type name
"""
kinds_by_dtype = {
    'int8': ElementKind.BYTE,
    'int16': ElementKind.SHORT,
    'int32': ElementKind.INT,
    'float32': ElementKind.FLOAT,
    'float64': ElementKind.DOUBLE,
    'uint8': ElementKind.UBYTE,
    'uint16': ElementKind.USHORT,
    'uint32': ElementKind.UINT,
    'int64': ElementKind.INT64,
    'uint64': ElementKind.UINT64
}

"""
Numpy types written for each supported kind
"""
dtypes_by_kind = {
    ElementKind.BYTE: np.dtype('int8'),
    ElementKind.SHORT: np.dtype('int16'),
    ElementKind.INT: np.dtype('int32'),
    ElementKind.FLOAT: np.dtype('float32'),
    ElementKind.DOUBLE: np.dtype('float64'),
    ElementKind.TEXT: np.dtype('S1')
}


def kind_of_datatype(datatype: Any) -> ElementKind:
    """
    Get the element kind of a variable from its netCDF4 datatype.
    :param datatype: numpy dtype, str, or a netCDF4 user defined type
    :return: element kind
    """
    if isinstance(datatype, netCDF4.CompoundType):
        return ElementKind.COMPOUND
    if isinstance(datatype, netCDF4.VLType):
        return ElementKind.VLEN
    if isinstance(datatype, netCDF4.EnumType):
        return ElementKind.ENUM
    if datatype is str:
        return ElementKind.STRING

    data_type = np.dtype(datatype)
    if data_type.kind == 'S':
        return ElementKind.TEXT
    if data_type.kind == 'V':
        return ElementKind.OPAQUE

    return kinds_by_dtype.get(data_type.name, ElementKind.UNKNOWN)


def kind_of_value(value: Any) -> ElementKind:
    """
    Get the element kind of an attribute value as returned by the netCDF library.
    :param value: attribute value
    :return: element kind
    """
    if isinstance(value, (str, bytes)):
        return ElementKind.TEXT
    if isinstance(value, list):
        # arrays of NC_STRING attributes come back as lists
        return ElementKind.STRING

    return kind_of_datatype(np.asarray(value).dtype)


def storage_dtype(data_type: np.dtype, values: Any = None) -> np.dtype:
    """
    Get the numpy type in which an array is written, raises an exception if the array cannot be stored.
    Integer arrays of other widths are narrowed to int32 when every value fits.
    :param data_type: numpy type of the array
    :param values: array values, used to check the integer range
    :return: storage type
    """
    kind = kinds_by_dtype.get(data_type.name)
    if kind is not None and kind in dtypes_by_kind:
        return dtypes_by_kind[kind]

    if data_type.kind in 'iu':
        limits = np.iinfo(np.int32)
        array = np.asarray(values)
        if array.size and (array.min() < limits.min or array.max() > limits.max):
            raise ValueError(f'Integer values do not fit in {ElementKind.INT.nc_name}.')
        return dtypes_by_kind[ElementKind.INT]
    if data_type.kind == 'f':
        return dtypes_by_kind[ElementKind.DOUBLE]

    raise TypeError(f'Type {data_type} is not supported. Supported types are: '
                    f'{", ".join(str(dtype) for dtype in dtypes_by_kind.values())}')


def format_number(value: Any) -> str:
    """
    Format an integer or floating point number without trailing zeros.
    :param value: number
    :return: text
    """
    if isinstance(value, (int, np.integer)):
        return str(int(value))

    return np.format_float_positional(value, trim='-')


def _decode_text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode('utf-8').rstrip('\x00')
    if isinstance(value, np.ndarray):
        return str(netCDF4.chartostring(value))

    return str(value)


def _decode_integer(value: Any):
    array = np.asarray(value)
    if array.size == 1:
        return int(array.ravel()[0])

    return [int(x) for x in array.ravel()]


def _decode_real(value: Any):
    array = np.asarray(value)
    if array.size == 1:
        return float(array.ravel()[0])

    return [float(x) for x in array.ravel()]


def _placeholder(value: Any):
    return None


"""
Decoder of each element kind, unsupported kinds map to the placeholder
"""
decoders: Dict[ElementKind, Callable[[Any], Any]] = {kind: _placeholder for kind in ElementKind}
decoders[ElementKind.TEXT] = _decode_text
decoders.update({kind: _decode_integer for kind in INTEGER_KINDS})
decoders.update({kind: _decode_real for kind in REAL_KINDS})


def decode(kind: ElementKind, value: Any) -> Any:
    """
    Convert a raw value into a Python value, unsupported kinds return their type name.
    :param kind: element kind of the value
    :param value: raw value read from the file
    :return: str, int, float (or a list of them for multi-valued attributes), or the type name
    """
    decoder = decoders[kind]
    if decoder is _placeholder:
        return kind.nc_name

    return decoder(value)


def format_value(kind: ElementKind, value: Any, separator: str = ',') -> str:
    """
    Render a raw value as text.
    :param kind: element kind of the value
    :param value: raw value read from the file
    :param separator: separator between the elements of multi-valued data
    :return: text
    """
    if not kind.supported:
        return kind.nc_name
    if kind == ElementKind.TEXT:
        return _decode_text(value)

    return separator.join(format_number(x) for x in np.asarray(value).ravel())
