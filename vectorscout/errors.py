# Copyright (C) 2025 Richard Owen
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
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Exception types raised by the scouting core."""


class ScoutError(Exception):
    """Base class for failures reported by scouting collaborators.

    Parameters
    ----------
    message : str
        Human-readable description of the failure.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class StoreError(ScoutError):
    """Raised when a record store cannot complete a read or write.

    Parameters
    ----------
    message : str
        Description of the failed store operation.
    """


class CodecError(ScoutError, ValueError):
    """Raised when a transfer payload is not a JSON object at all.

    Parameters
    ----------
    message : str
        Description of why the payload was rejected.
    """
