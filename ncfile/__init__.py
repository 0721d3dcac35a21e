"""
    Python convenience layer over netCDF files.

    Typed accessors read and write scalars, vectors, matrices and N-dimensional arrays stored in netCDF
    variables, together with their attributes, and navigate the nested groups of NetCDF-4 files.
    Multi-dimensional data is stored in row-major order and can be exchanged in column-major order.

    Every call to the netCDF library is checked, failures are raised as ncfile.errors.LibraryError.
"""
from ._hl.files import File
from ._hl.types import ElementKind
from ._hl.variables import VariableRef, VariableInfo
from .errors import NcFileError, NotFoundError, TypeMismatchError, DimensionError, LibraryError, ClosedFileError
from .version import version as __version__
