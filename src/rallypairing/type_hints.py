"""Type hint aliases used across Rally Pairing."""

# Rally Pairing
# Copyright (C) 2025  Rally Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from typing import Callable, Dict, Literal, Set, Tuple

# Soft constraint tag carried by a match
Compromise = Literal["repeat-partner", "repeat-opponent", "rating-gap"]

# Player id pair forming one side of a match
Team = Tuple[str, str]
# Player id -> set of player ids
RelationMap = Dict[str, Set[str]]
# Builds a match id from (round index, wave index, court)
MatchIdFactory = Callable[[int, int, int], str]
