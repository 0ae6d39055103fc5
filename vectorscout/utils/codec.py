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
"""Compact JSON payloads carried off-device in transfer codes.

Match payloads use the abbreviated keys ``v, e, m, rd, sn, t, sp, l, ns, a``;
each action is ``{p, at, d, qd?}`` where ``qd`` is the detail payload encoded
as a nested JSON string. Pit payloads add ``type: "pit"`` and carry auto paths
as ``{n, s, d?}`` with steps written as ``"<letter>:<value>"`` tokens.

Decoding is lenient: a single bad action, detail payload or step is dropped
and reported to the debugger rather than rejecting the whole scan.
"""

from __future__ import annotations

import json
import posixpath
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from vectorscout.engine.config import SCOUT_CONFIG
from vectorscout.errors import CodecError
from vectorscout.models.action import ActionRecord, MatchPhase, resolve_action_type
from vectorscout.models.qualitative import qualitative_from_json
from vectorscout.models.scout import AutoPath, AutoPathStep, MatchScoutData, PitScoutData, StepType
from vectorscout.utils.debug import ScoutDebugger

MATCH_HEADERS: Tuple[str, ...] = ("Event", "Match", "Robot", "Scout", "Team", "StartPos", "Loaded", "NoShow")
"""Column headers of the match summary table."""

ACTION_HEADERS: Tuple[str, ...] = (
    "Event",
    "Match",
    "Team",
    "ActionNum",
    "Phase",
    "ActionType",
    "DurationMs",
    "ShootLocation",
    "LoadLocation",
    "FerryType",
    "FerryDelivery",
    "ClimbResult",
    "DefenseTypes",
    "TargetRobot",
    "FoulType",
    "DamagedComponents",
)
"""Column headers of the per-action detail table."""

_STEP_LETTERS: Dict[str, StepType] = {step_type.name[0]: step_type for step_type in StepType}
_SEPARATORS = (",", ":")


@dataclass(frozen=True)
class SpreadsheetRows:
    """Rows a scanned match payload contributes to the collection spreadsheet.

    Parameters
    ----------
    match_row : Tuple[Any, ...]
        One row aligned with :data:`MATCH_HEADERS`.
    action_rows : Tuple[Tuple[Any, ...], ...]
        One row per action, aligned with :data:`ACTION_HEADERS`.
    """

    match_row: Tuple[Any, ...]
    action_rows: Tuple[Tuple[Any, ...], ...]

    @property
    def duplicate_key(self) -> Tuple[Any, Any, Any]:
        """Event, match and team; a second scan with the same key is a duplicate."""
        return (self.match_row[0], self.match_row[1], self.match_row[4])


def encode_match(data: MatchScoutData, debugger: Optional[ScoutDebugger] = None) -> str:
    """Serialise a match record into transfer-code text.

    Parameters
    ----------
    data : MatchScoutData
        Record to encode.
    debugger : Optional[ScoutDebugger]
        Receives a warning when the payload exceeds the code capacity.

    Returns
    -------
    str
        Compact JSON object text.
    """
    actions: List[Dict[str, Any]] = []
    for record in data.action_records:
        entry: Dict[str, Any] = {
            "p": record.phase.value,
            "at": record.action_type.name,
            "d": record.duration_ms,
        }
        if record.qualitative_data is not None:
            entry["qd"] = record.qualitative_data.to_json()
        actions.append(entry)

    payload = {
        "v": SCOUT_CONFIG.codec.version,
        "e": data.event,
        "m": data.match_number,
        "rd": data.robot_designation,
        "sn": data.scout_name,
        "t": data.team_number,
        "sp": data.start_position,
        "l": data.loaded,
        "ns": data.no_show,
        "a": actions,
    }
    text = json.dumps(payload, separators=_SEPARATORS)
    _warn_if_oversized(text, transfer_label(data), debugger)
    return text


def encode_pit(data: PitScoutData, debugger: Optional[ScoutDebugger] = None) -> str:
    """Serialise a pit record into transfer-code text.

    The robot photo is never included; drawings are referenced by file name
    only.

    Parameters
    ----------
    data : PitScoutData
        Record to encode.
    debugger : Optional[ScoutDebugger]
        Receives a warning when the payload exceeds the code capacity.

    Returns
    -------
    str
        Compact JSON object text.
    """
    paths: List[Dict[str, Any]] = []
    for path in data.auto_paths:
        entry: Dict[str, Any] = {"n": path.name, "s": [step.token() for step in path.steps]}
        if path.drawing_path is not None:
            entry["d"] = posixpath.basename(path.drawing_path)
        paths.append(entry)

    payload = {
        "v": SCOUT_CONFIG.codec.version,
        "type": SCOUT_CONFIG.codec.pit_type,
        "e": data.event,
        "t": data.team_number,
        "dt": data.drivetrain_type,
        "pr": data.preferred_role,
        "pp": data.preferred_path,
        "ap": paths,
    }
    text = json.dumps(payload, separators=_SEPARATORS)
    _warn_if_oversized(text, transfer_label(data), debugger)
    return text


def payload_fits(text: str, capacity: Optional[int] = None) -> bool:
    """Return whether ``text`` fits in a single transfer code.

    Parameters
    ----------
    text : str
        Encoded payload.
    capacity : Optional[int]
        Byte budget; defaults to the configured QR capacity.

    Returns
    -------
    bool
        ``True`` when the UTF-8 payload is within the budget.
    """
    limit = capacity if capacity is not None else SCOUT_CONFIG.codec.qr_capacity
    return len(text.encode("utf-8")) <= limit


def transfer_label(data: Union[MatchScoutData, PitScoutData]) -> str:
    """Return the label printed under a transfer code.

    Parameters
    ----------
    data : Union[MatchScoutData, PitScoutData]
        Record the code was generated for.

    Returns
    -------
    str
        ``"<event>_<match>_<robot>_<team>"`` for matches, ``"Pit_<team>"``
        for pit records.
    """
    if isinstance(data, PitScoutData):
        return f"Pit_{data.team_number}"
    return f"{data.event}_{data.match_number}_{data.robot_designation}_{data.team_number}"


def decode(
    text: str, debugger: Optional[ScoutDebugger] = None
) -> Union[MatchScoutData, PitScoutData]:
    """Decode a transfer payload of either kind.

    Parameters
    ----------
    text : str
        Scanned payload.
    debugger : Optional[ScoutDebugger]
        Receives notes about dropped fields.

    Returns
    -------
    Union[MatchScoutData, PitScoutData]
        Pit record when the payload is tagged ``"pit"``, match record otherwise.

    Raises
    ------
    CodecError
        If the text is not a JSON object.
    """
    payload = _load_object(text)
    if payload.get("type") == SCOUT_CONFIG.codec.pit_type:
        return _pit_from_payload(payload, debugger)
    return _match_from_payload(payload, debugger)


def decode_match(text: str, debugger: Optional[ScoutDebugger] = None) -> MatchScoutData:
    """Decode a match payload.

    Parameters
    ----------
    text : str
        Scanned payload produced by :func:`encode_match`.
    debugger : Optional[ScoutDebugger]
        Receives notes about dropped fields.

    Returns
    -------
    MatchScoutData
        Reconstructed record. Actions start at zero and end at their duration.

    Raises
    ------
    CodecError
        If the text is not a JSON object.
    """
    return _match_from_payload(_load_object(text), debugger)


def decode_pit(text: str, debugger: Optional[ScoutDebugger] = None) -> PitScoutData:
    """Decode a pit payload.

    Parameters
    ----------
    text : str
        Scanned payload produced by :func:`encode_pit`.
    debugger : Optional[ScoutDebugger]
        Receives notes about dropped fields.

    Returns
    -------
    PitScoutData
        Reconstructed record without a photo.

    Raises
    ------
    CodecError
        If the text is not a JSON object.
    """
    return _pit_from_payload(_load_object(text), debugger)


def decode_rows(text: str) -> SpreadsheetRows:
    """Flatten a match payload into spreadsheet rows.

    Missing detail fields become empty cells and list fields are joined with
    ``", "``. A detail payload that does not parse contributes no cells.

    Parameters
    ----------
    text : str
        Scanned match payload.

    Returns
    -------
    SpreadsheetRows
        Summary row and one detail row per action.

    Raises
    ------
    CodecError
        If the text is not a JSON object.
    """
    payload = _load_object(text)
    event, match, team = payload.get("e"), payload.get("m"), payload.get("t")
    match_row = (
        event,
        match,
        payload.get("rd"),
        payload.get("sn"),
        team,
        payload.get("sp"),
        payload.get("l"),
        payload.get("ns") or False,
    )

    action_rows = []
    raw_actions = payload.get("a") or []
    for index, action in enumerate(raw_actions if isinstance(raw_actions, list) else []):
        if not isinstance(action, dict):
            continue
        details = _parse_detail(action.get("qd"))
        action_rows.append(
            (
                event,
                match,
                team,
                index + 1,
                action.get("p"),
                action.get("at"),
                action.get("d"),
                details.get("location") or "",
                details.get("loadLocation") or "",
                details.get("ferryType") or "",
                details.get("ferryDelivery") or "",
                details.get("result") or "",
                ", ".join(str(t) for t in details["types"]) if details.get("types") else "",
                details.get("targetRobot") or "",
                details.get("type") or "",
                ", ".join(str(c) for c in details["components"]) if details.get("components") else "",
            )
        )
    return SpreadsheetRows(match_row=match_row, action_rows=tuple(action_rows))


def _load_object(text: str) -> Dict[str, Any]:
    """Parse ``text`` and insist on a JSON object.

    Parameters
    ----------
    text : str
        Scanned payload.

    Returns
    -------
    Dict[str, Any]
        The decoded object.

    Raises
    ------
    CodecError
        If the text is not valid JSON or not an object.
    """
    try:
        payload = json.loads(text)
    except (TypeError, json.JSONDecodeError) as exc:
        raise CodecError(f"Payload is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise CodecError(f"Payload must be a JSON object, got {type(payload).__name__}")
    return payload


def _check_version(payload: Mapping[str, Any], debugger: Optional[ScoutDebugger]) -> None:
    """Report payloads written by an unknown codec version.

    Parameters
    ----------
    payload : Mapping[str, Any]
        Decoded payload.
    debugger : Optional[ScoutDebugger]
        Receives the warning.
    """
    version = payload.get("v")
    if version != SCOUT_CONFIG.codec.version and debugger is not None:
        debugger.log_codec("decode", f"Unknown payload version {version!r}; reading known keys only")


def _match_from_payload(payload: Mapping[str, Any], debugger: Optional[ScoutDebugger]) -> MatchScoutData:
    """Build a match record from a decoded payload.

    Parameters
    ----------
    payload : Mapping[str, Any]
        Decoded match payload.
    debugger : Optional[ScoutDebugger]
        Receives notes about dropped actions.

    Returns
    -------
    MatchScoutData
        Reconstructed record.
    """
    _check_version(payload, debugger)
    records = []
    actions = payload.get("a") or []
    if not isinstance(actions, list):
        actions = []
    for index, entry in enumerate(actions):
        record = _action_from_entry(entry, debugger)
        if record is None:
            if debugger is not None:
                debugger.log_codec("decode", f"Skipped action {index + 1}: {entry!r}")
            continue
        records.append(record)

    return MatchScoutData(
        event=str(payload.get("e", "")),
        match_number=str(payload.get("m", "")),
        robot_designation=str(payload.get("rd", "")),
        scout_name=str(payload.get("sn", "")),
        team_number=str(payload.get("t", "")),
        start_position=str(payload.get("sp", "")),
        loaded=bool(payload.get("l", False)),
        no_show=bool(payload.get("ns", False)),
        action_records=tuple(records),
    )


def _action_from_entry(entry: Any, debugger: Optional[ScoutDebugger]) -> Optional[ActionRecord]:
    """Rebuild one action record from its payload entry.

    Parameters
    ----------
    entry : Any
        Element of the ``a`` array.
    debugger : Optional[ScoutDebugger]
        Receives a note when the detail payload is dropped.

    Returns
    -------
    Optional[ActionRecord]
        The record, or ``None`` when the phase, action name or duration is
        unusable.
    """
    if not isinstance(entry, dict):
        return None
    try:
        phase = MatchPhase(entry.get("p"))
        duration = int(entry.get("d", 0))
    except (TypeError, ValueError, OverflowError):
        return None
    action_type = resolve_action_type(str(entry.get("at", "")), phase)
    if action_type is None or duration < 0:
        return None

    qualitative_data = None
    raw_detail = entry.get("qd")
    if raw_detail is not None:
        qualitative_data = qualitative_from_json(raw_detail if isinstance(raw_detail, str) else None, action_type)
        if qualitative_data is None and debugger is not None:
            debugger.log_codec("decode", f"Dropped malformed detail for {action_type.key}: {raw_detail!r}")

    return ActionRecord(
        phase=phase,
        action_type=action_type,
        start_time_ms=0,
        end_time_ms=duration,
        qualitative_data=qualitative_data,
    )


def _pit_from_payload(payload: Mapping[str, Any], debugger: Optional[ScoutDebugger]) -> PitScoutData:
    """Build a pit record from a decoded payload.

    Parameters
    ----------
    payload : Mapping[str, Any]
        Decoded pit payload.
    debugger : Optional[ScoutDebugger]
        Receives notes about dropped steps.

    Returns
    -------
    PitScoutData
        Reconstructed record.
    """
    _check_version(payload, debugger)
    try:
        team_number = int(payload.get("t", 0))
    except (TypeError, ValueError, OverflowError):
        team_number = 0

    paths = []
    raw_paths = payload.get("ap") or []
    for entry in raw_paths if isinstance(raw_paths, list) else []:
        if not isinstance(entry, dict):
            continue
        steps = []
        raw_steps = entry.get("s") or []
        for token in raw_steps if isinstance(raw_steps, list) else []:
            step = _step_from_token(token)
            if step is None:
                if debugger is not None:
                    debugger.log_codec("decode", f"Skipped malformed step {token!r}")
                continue
            steps.append(step)
        drawing = entry.get("d")
        paths.append(
            AutoPath(
                name=str(entry.get("n", "")),
                steps=tuple(steps),
                drawing_path=str(drawing) if drawing is not None else None,
            )
        )

    return PitScoutData(
        event=str(payload.get("e", "")),
        team_number=team_number,
        drivetrain_type=str(payload.get("dt", "")),
        preferred_role=str(payload.get("pr", "")),
        preferred_path=str(payload.get("pp", "")),
        auto_paths=tuple(paths),
    )


def _step_from_token(token: Any) -> Optional[AutoPathStep]:
    """Parse a ``"<letter>:<value>"`` step token.

    Parameters
    ----------
    token : Any
        Element of a path's ``s`` array.

    Returns
    -------
    Optional[AutoPathStep]
        The step, or ``None`` for tokens without a known letter prefix.
    """
    if not isinstance(token, str):
        return None
    letter, separator, value = token.partition(":")
    step_type = _STEP_LETTERS.get(letter)
    if not separator or step_type is None:
        return None
    return AutoPathStep(step_type, value)


def _parse_detail(raw: Any) -> Dict[str, Any]:
    """Parse a nested detail string the way the spreadsheet does.

    Parameters
    ----------
    raw : Any
        Value of an action's ``qd`` key.

    Returns
    -------
    Dict[str, Any]
        Parsed object, or an empty mapping when absent or malformed.
    """
    if not raw or not isinstance(raw, str):
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _warn_if_oversized(text: str, label: str, debugger: Optional[ScoutDebugger]) -> None:
    """Warn when an encoded payload will not fit in one transfer code.

    Parameters
    ----------
    text : str
        Encoded payload.
    label : str
        Transfer label of the record, for the log line.
    debugger : Optional[ScoutDebugger]
        Receives the warning.
    """
    if debugger is not None and not payload_fits(text):
        debugger.log_codec(
            "encode",
            f"{label} payload is {len(text.encode('utf-8'))} bytes; "
            f"capacity is {SCOUT_CONFIG.codec.qr_capacity}",
        )
