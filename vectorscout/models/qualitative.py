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
"""Detail form payloads attached to committed actions.

Each variant serialises to the field names the receiving spreadsheet reads
(``loadLocation``, ``ferryType`` and so on), so the Python attribute names and
the wire names deliberately differ.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type

from vectorscout.models.action import ActionType, MatchPhase


class QualitativeData:
    """Common behaviour shared by every detail form payload."""

    kind: ClassVar[str] = ""

    def to_dict(self) -> Dict[str, Any]:
        """Return the payload using its wire field names.

        Returns
        -------
        Dict[str, Any]
            JSON-compatible mapping of the payload.
        """
        raise NotImplementedError

    def to_json(self) -> str:
        """Serialise the payload as compact JSON text.

        Returns
        -------
        str
            JSON object text without insignificant whitespace.
        """
        return json.dumps(self.to_dict(), separators=(",", ":"))


@dataclass(frozen=True)
class LoadData(QualitativeData):
    """Where a robot collected game pieces.

    Parameters
    ----------
    load_location : str
        Zone label chosen on the load diagram.
    """

    load_location: str
    kind: ClassVar[str] = "load"

    def to_dict(self) -> Dict[str, Any]:
        """Return the payload using its wire field names.

        Returns
        -------
        Dict[str, Any]
            ``{"loadLocation": ...}``.
        """
        return {"loadLocation": self.load_location}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "LoadData":
        """Build the payload from its wire mapping.

        Parameters
        ----------
        payload : Mapping[str, Any]
            Decoded JSON object.

        Returns
        -------
        LoadData
            The reconstructed payload.
        """
        return cls(load_location=str(payload["loadLocation"]))


@dataclass(frozen=True)
class ShootData(QualitativeData):
    """Where a robot shot from.

    Parameters
    ----------
    location : str
        Zone label chosen on the shoot diagram.
    """

    location: str
    kind: ClassVar[str] = "shoot"

    def to_dict(self) -> Dict[str, Any]:
        """Return the payload using its wire field names.

        Returns
        -------
        Dict[str, Any]
            ``{"location": ...}``.
        """
        return {"location": self.location}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ShootData":
        """Build the payload from its wire mapping.

        Parameters
        ----------
        payload : Mapping[str, Any]
            Decoded JSON object.

        Returns
        -------
        ShootData
            The reconstructed payload.
        """
        return cls(location=str(payload["location"]))


@dataclass(frozen=True)
class FerryData(QualitativeData):
    """How and where a robot moved game pieces towards its alliance.

    Parameters
    ----------
    ferry_type : str
        ``"Shoot"`` or ``"Dump"``.
    ferry_delivery : str
        Zone label chosen on the ferry diagram.
    """

    ferry_type: str
    ferry_delivery: str
    kind: ClassVar[str] = "ferry"

    def to_dict(self) -> Dict[str, Any]:
        """Return the payload using its wire field names.

        Returns
        -------
        Dict[str, Any]
            ``{"ferryType": ..., "ferryDelivery": ...}``.
        """
        return {"ferryType": self.ferry_type, "ferryDelivery": self.ferry_delivery}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "FerryData":
        """Build the payload from its wire mapping.

        Parameters
        ----------
        payload : Mapping[str, Any]
            Decoded JSON object.

        Returns
        -------
        FerryData
            The reconstructed payload.
        """
        return cls(ferry_type=str(payload["ferryType"]), ferry_delivery=str(payload["ferryDelivery"]))


@dataclass(frozen=True)
class ClimbData(QualitativeData):
    """Outcome of a climb attempt.

    Parameters
    ----------
    result : str
        Level reached (``"L1"``..``"L3"``) or ``"Fail"``.
    phase : MatchPhase
        Phase the climb was attempted in.
    """

    result: str
    phase: MatchPhase
    kind: ClassVar[str] = "climb"

    def to_dict(self) -> Dict[str, Any]:
        """Return the payload using its wire field names.

        Returns
        -------
        Dict[str, Any]
            ``{"result": ..., "phase": ...}`` with the phase name.
        """
        return {"result": self.result, "phase": self.phase.value}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ClimbData":
        """Build the payload from its wire mapping.

        Parameters
        ----------
        payload : Mapping[str, Any]
            Decoded JSON object.

        Returns
        -------
        ClimbData
            The reconstructed payload.
        """
        return cls(result=str(payload["result"]), phase=MatchPhase(payload["phase"]))


@dataclass(frozen=True)
class DefenseData(QualitativeData):
    """Defensive play against an opposing robot.

    Parameters
    ----------
    types : Tuple[str, ...]
        Defence styles observed, in the order they were ticked.
    target_robot : str
        Designation of the defended robot, for example ``"Blue2"``.
    """

    types: Tuple[str, ...]
    target_robot: str
    kind: ClassVar[str] = "defense"

    def to_dict(self) -> Dict[str, Any]:
        """Return the payload using its wire field names.

        Returns
        -------
        Dict[str, Any]
            ``{"types": [...], "targetRobot": ...}``.
        """
        return {"types": list(self.types), "targetRobot": self.target_robot}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "DefenseData":
        """Build the payload from its wire mapping.

        Parameters
        ----------
        payload : Mapping[str, Any]
            Decoded JSON object.

        Returns
        -------
        DefenseData
            The reconstructed payload.
        """
        return cls(types=tuple(str(t) for t in payload["types"]), target_robot=str(payload["targetRobot"]))


@dataclass(frozen=True)
class FoulData(QualitativeData):
    """Severity of a foul.

    Parameters
    ----------
    type : str
        ``"Major"`` or ``"Minor"``.
    """

    type: str
    kind: ClassVar[str] = "foul"

    def to_dict(self) -> Dict[str, Any]:
        """Return the payload using its wire field names.

        Returns
        -------
        Dict[str, Any]
            ``{"type": ...}``.
        """
        return {"type": self.type}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "FoulData":
        """Build the payload from its wire mapping.

        Parameters
        ----------
        payload : Mapping[str, Any]
            Decoded JSON object.

        Returns
        -------
        FoulData
            The reconstructed payload.
        """
        return cls(type=str(payload["type"]))


@dataclass(frozen=True)
class DamagedData(QualitativeData):
    """Robot subsystems seen damaged.

    Parameters
    ----------
    components : Tuple[str, ...]
        Damaged components in the order they were ticked.
    """

    components: Tuple[str, ...]
    kind: ClassVar[str] = "damaged"

    def to_dict(self) -> Dict[str, Any]:
        """Return the payload using its wire field names.

        Returns
        -------
        Dict[str, Any]
            ``{"components": [...]}``.
        """
        return {"components": list(self.components)}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "DamagedData":
        """Build the payload from its wire mapping.

        Parameters
        ----------
        payload : Mapping[str, Any]
            Decoded JSON object.

        Returns
        -------
        DamagedData
            The reconstructed payload.
        """
        return cls(components=tuple(str(c) for c in payload["components"]))


@dataclass(frozen=True)
class EmptyData(QualitativeData):
    """Placeholder for actions whose detail form has no fields.

    Parameters
    ----------
    placeholder : str, default=""
        Always empty; kept so the wire object is never ``{}``.
    """

    placeholder: str = ""
    kind: ClassVar[str] = "empty"

    def to_dict(self) -> Dict[str, Any]:
        """Return the payload using its wire field names.

        Returns
        -------
        Dict[str, Any]
            ``{"placeholder": ""}``.
        """
        return {"placeholder": self.placeholder}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "EmptyData":
        """Build the payload from its wire mapping.

        Parameters
        ----------
        payload : Mapping[str, Any]
            Decoded JSON object; its contents are ignored.

        Returns
        -------
        EmptyData
            A fresh empty payload.
        """
        return cls()


QUALITATIVE_TYPES: Dict[str, Type[QualitativeData]] = {
    cls.kind: cls
    for cls in (LoadData, ShootData, FerryData, ClimbData, DefenseData, FoulData, DamagedData, EmptyData)
}
"""Detail payload class for each ``ActionType.qualitative_kind``."""


def qualitative_from_dict(payload: Mapping[str, Any], action_type: ActionType) -> Optional[QualitativeData]:
    """Rebuild the detail payload ``action_type`` produces from a mapping.

    Parameters
    ----------
    payload : Mapping[str, Any]
        Decoded JSON object using wire field names.
    action_type : ActionType
        Action whose detail form produced the payload.

    Returns
    -------
    Optional[QualitativeData]
        The payload, or ``None`` when required fields are missing or malformed.
    """
    data_cls = QUALITATIVE_TYPES.get(action_type.qualitative_kind)
    if data_cls is None:
        return None
    try:
        return data_cls.from_dict(payload)  # type: ignore[attr-defined]
    except (KeyError, TypeError, ValueError):
        return None


def qualitative_from_json(text: Optional[str], action_type: ActionType) -> Optional[QualitativeData]:
    """Parse a detail payload stored as JSON text.

    Parameters
    ----------
    text : Optional[str]
        JSON object text, as stored in records and transfer payloads.
    action_type : ActionType
        Action whose detail form produced the payload.

    Returns
    -------
    Optional[QualitativeData]
        The payload, or ``None`` for blank, malformed or mismatched text.
    """
    if not text or not text.strip():
        return None
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    return qualitative_from_dict(payload, action_type)
