"""
    Implements the navigation path through nested groups.

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
from typing import List, Tuple

import netCDF4


class GroupPath:
    """
        Ordered sequence of the groups visited from the root down to the current group.
    """
    def __init__(self, root: netCDF4.Dataset):
        """
        Create a path positioned at the root.
        :param root: root dataset of the file
        """
        self._groups: List[netCDF4.Group] = [root]

    def __len__(self) -> int:
        return len(self._groups)

    @property
    def root(self) -> netCDF4.Dataset:
        return self._groups[0]

    @property
    def current(self) -> netCDF4.Group:
        return self._groups[-1]

    def at_root(self) -> bool:
        return len(self._groups) == 1

    def names(self) -> Tuple[str, ...]:
        """
        Names of the groups below the root, outermost first.
        :return: tuple of group names
        """
        return tuple(group.name for group in self._groups[1:])

    def __str__(self):
        return '/' + '/'.join(self.names())

    def reset(self):
        del self._groups[1:]

    def enter(self, group: netCDF4.Group):
        """
        Move into a group.
        A group already on the path truncates the path to its position, any other group is appended.
        File.change_group and File.create_group only enter children of the current group, which are never
        on the path, so the truncation is only reached when a caller enters a visited group directly.
        :param group: group to enter
        :return:
        """
        for index, visited in enumerate(self._groups):
            if visited.path == group.path:
                del self._groups[index + 1:]
                return
        self._groups.append(group)

    def up(self) -> bool:
        """
        Move to the parent group, does nothing at the root.
        :return: True if the path changed
        """
        if self.at_root():
            return False
        self._groups.pop()
        return True

    def snapshot(self) -> Tuple[netCDF4.Group, ...]:
        return tuple(self._groups)

    def restore(self, groups: Tuple[netCDF4.Group, ...]):
        self._groups = list(groups)
