"""
    Exceptions raised by NcFile.

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
from typing import Optional


class NcFileError(Exception):
    """
        Base class of the errors raised by NcFile.
    """


class NotFoundError(NcFileError, LookupError):
    """
        A file, variable, attribute, dimension or group does not exist.
    """
    def __init__(self, message: str, name: Optional[str] = None):
        super().__init__(message)
        self.name = name


class TypeMismatchError(NcFileError, TypeError):
    """
        The stored element type is not the requested one.
    """
    def __init__(self, expected, actual):
        """
        :param expected: requested element kind
        :param actual: element kind found in the file
        """
        super().__init__(f'Data is not {expected.label}. Found {actual.nc_name} ({actual.label})')
        self.expected = expected
        self.actual = actual


class DimensionError(NcFileError, ValueError):
    """
        The stored number of dimensions is not the requested one.
    """
    def __init__(self, expected: int, actual: int, getter: str):
        super().__init__(f'Wrong number of dimensions in {getter}(). Expected {expected}, found {actual}')
        self.expected = expected
        self.actual = actual


class LibraryError(NcFileError, IOError):
    """
        Failure reported by the netCDF library.
    """


class ClosedFileError(NcFileError, IOError):
    """
        The file is not open, or not open in the mode required by the operation.
    """


@contextmanager
def library_errors():
    """
    Convert the exceptions raised by the netCDF library into LibraryError.
    :return:
    """
    try:
        yield
    except NcFileError:
        raise
    except (RuntimeError, OSError) as e:
        raise LibraryError(str(e)) from e
