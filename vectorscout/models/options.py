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
"""Fixed option lists offered by the scouting forms.

Values are stored and transmitted verbatim, so renaming an entry here changes
the transfer payload and the receiving spreadsheet columns.
"""

from typing import Dict, List

ROBOT_DESIGNATIONS: List[str] = ["Red1", "Red2", "Red3", "Blue1", "Blue2", "Blue3"]

START_LOCATIONS: List[str] = ["L1", "L2", "L3", "L3a", "L3b", "L4", "L5"]
SHOOT_LOCATIONS: List[str] = ["H", "R1", "R2", "L1", "L2"]
FIELD_ZONES: List[str] = [f"{row}{column}" for row in "ABCDE" for column in range(1, 6)]

FERRY_TYPES: List[str] = ["Shoot", "Dump"]
AUTON_CLIMB_RESULTS: List[str] = ["L1", "Fail"]
TELEOP_CLIMB_RESULTS: List[str] = ["L1", "L2", "L3", "Fail"]
DEFENSE_TYPES: List[str] = ["Pin", "Altered Shot", "Block"]
FOUL_TYPES: List[str] = ["Major", "Minor"]
DAMAGED_COMPONENTS: List[str] = ["Drivetrain", "Intake", "Shooter", "Climber"]

# Pit inspection
DRIVETRAIN_TYPES: List[str] = ["Swerve", "Tank", "Mecanum", "Other"]
PREFERRED_ROLES: List[str] = ["Score", "Ferry", "Defense"]
PREFERRED_PATHS: List[str] = ["Trench", "Bump", "Both"]
PIT_START_POSITIONS: List[str] = ["1", "2", "3", "3a", "3b", "4", "5"]
PATH_ACTIONS: List[str] = ["Load", "Score", "Ferry", "Move", "Climb"]

LOAD_LOCATIONS: List[str] = ["Neutral", "Depot", "Outpost", "Alliance"]
PIT_SCORE_LOCATIONS: List[str] = ["H", "R1", "R2", "L1", "L2"]
PIT_FERRY_LOCATIONS: List[str] = ["Shoot Alliance", "Dump Alliance", "Dump Outpost"]
MOVE_LOCATIONS: List[str] = ["Neutral", "Alliance", "Depot", "Outpost"]
PIT_CLIMB_LOCATIONS: List[str] = ["L1"]

PATH_LOCATIONS: Dict[str, List[str]] = {
    "Load": LOAD_LOCATIONS,
    "Score": PIT_SCORE_LOCATIONS,
    "Ferry": PIT_FERRY_LOCATIONS,
    "Move": MOVE_LOCATIONS,
    "Climb": PIT_CLIMB_LOCATIONS,
}
"""Location choices offered after each auto-path action."""
