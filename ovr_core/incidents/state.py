# ovr_core/incidents/state.py
from __future__ import annotations

from ovr_core.incidents.models import IncidentStatus

# Edges a facility user may take through the generic status update.
# Closure moves go through request/approve/reject only.
MANUAL_TRANSITIONS = {
    IncidentStatus.OPEN: {IncidentStatus.IN_REVIEW},
    IncidentStatus.IN_REVIEW: {IncidentStatus.OPEN},
}

CLOSURE_REQUESTABLE = {IncidentStatus.OPEN, IncidentStatus.IN_REVIEW}


def can_move_manually(current: str, target: str) -> bool:
    return target in MANUAL_TRANSITIONS.get(current, set())
