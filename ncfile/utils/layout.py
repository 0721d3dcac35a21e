"""
    Memory layout conversions between row-major and column-major buffers.

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
from typing import Sequence
from numpy import ndarray

import numpy as np


def check_buffer(flat: ndarray, shape: Sequence[int]) -> ndarray:
    """
    Check that a buffer is flat and holds exactly the number of elements described by a shape.
    :param flat: 1-D buffer
    :param shape: extents of each axis
    :return: the buffer as an array
    """
    flat = np.asarray(flat)
    if flat.ndim != 1:
        raise ValueError(f'Expected a flat buffer, got an array of rank {flat.ndim}.')

    size = int(np.prod(shape, dtype=np.int64))
    if flat.size != size:
        raise ValueError(f'Buffer of size {flat.size} does not match shape {tuple(shape)}.')

    return flat


def row_major_to_col_major(flat: ndarray, shape: Sequence[int]) -> ndarray:
    """
    Reorder a flat row-major (C ordered) buffer into column-major (Fortran ordered) storage.
    Element (i0, ..., iN) keeps its logical position, only its offset in the buffer changes.
    :param flat: 1-D buffer in row-major order
    :param shape: extents of each axis
    :return: new 1-D buffer in column-major order
    """
    flat = check_buffer(flat, shape)
    if len(shape) < 2:
        return flat.copy()

    return flat.reshape(shape, order='C').ravel(order='F')


def col_major_to_row_major(flat: ndarray, shape: Sequence[int]) -> ndarray:
    """
    Reorder a flat column-major (Fortran ordered) buffer into row-major (C ordered) storage.
    :param flat: 1-D buffer in column-major order
    :param shape: extents of each axis
    :return: new 1-D buffer in row-major order
    """
    flat = check_buffer(flat, shape)
    if len(shape) < 2:
        return flat.copy()

    return flat.reshape(shape, order='F').ravel(order='C')
