"""
    Configuration file

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

"""
    Data model used when creating a file without an explicit format.
"""
DEFAULT_FORMAT = 'NETCDF4'

"""
    Data models supporting nested groups.
"""
HIERARCHICAL_FORMATS = frozenset(['NETCDF4'])

"""
    Human readable names of the data models.
"""
FORMAT_NAMES = {
    'NETCDF3_CLASSIC': 'Classic (v1)',
    'NETCDF3_64BIT_OFFSET': '64-bit offset (v2)',
    'NETCDF3_64BIT_DATA': '64-bit data (v5)',
    'NETCDF4': 'NetCDF-4 (HDF5)',
    'NETCDF4_CLASSIC': 'NetCDF-4 Classic (HDF5)'
}

"""
    Name given to the dimension created for each axis of a variable.
"""
DIMENSION_NAME_FORMAT = '{variable}_{axis}'

"""
    Separator between the elements of a variable rendered as text.
"""
VALUE_SEPARATOR = ','

"""
    Indentation unit of the diagnostic dump.
"""
INDENT = '\t'
