"""
    Run tests for the memory layout conversions

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
import unittest
import numpy as np

from ncfile.utils.layout import row_major_to_col_major, col_major_to_row_major, check_buffer


class TestLayout(unittest.TestCase):
    def test_matrix_row_to_col_major(self):
        flat = np.arange(6, dtype=np.float64)

        assert np.all(row_major_to_col_major(flat, (2, 3)) == [0, 3, 1, 4, 2, 5])

    def test_matrix_col_to_row_major(self):
        flat = np.array([0, 3, 1, 4, 2, 5], dtype=np.float64)

        assert np.all(col_major_to_row_major(flat, (2, 3)) == np.arange(6))

    def test_tensor_keeps_logical_indexing(self):
        shape = (2, 3, 7, 1)
        tensor = np.random.random(shape)

        col_major = row_major_to_col_major(tensor.ravel(), shape)

        np.testing.assert_array_equal(col_major.reshape(shape, order='F'), tensor)
        np.testing.assert_array_equal(col_major_to_row_major(col_major, shape), tensor.ravel())

    def test_vector_is_copied(self):
        flat = np.arange(4, dtype=np.float64)
        converted = row_major_to_col_major(flat, (4,))

        np.testing.assert_array_equal(converted, flat)
        assert converted is not flat

    def test_size_mismatch(self):
        with self.assertRaises(ValueError):
            row_major_to_col_major(np.arange(5), (2, 3))

    def test_buffer_not_flat(self):
        with self.assertRaises(ValueError):
            check_buffer(np.zeros((2, 3)), (2, 3))


if __name__ == '__main__':
    unittest.main()
