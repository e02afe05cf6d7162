"""
Client actions produced by tools.

Some tools do not change data but ask the frontend to do something once the
answer has been streamed: open the couple editor pre-filled, or navigate
somewhere. At most one action survives a request; see ``ActionTracker``.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

ACTION_OPEN_COUPLE_MODAL = 'open_couple_modal'
ACTION_NAVIGATE = 'navigate'

ALLOWED_URLS = frozenset({
    '/planners',
    '/planners?view=couples',
    '/planners?view=vendors',
    '/planners?view=settings',
})

# /planners/couples/<share_link_id>, optionally with a tab
COUPLE_URL_PATTERN = re.compile(r'^/planners/couples/[a-zA-Z0-9_-]+(\?tab=(overview|vendors))?$')


def is_allowed_url(url: str) -> bool:
    """True when ``url`` is a planner page the assistant may navigate to."""
    if not isinstance(url, str):
        return False
    return url in ALLOWED_URLS or COUPLE_URL_PATTERN.fullmatch(url) is not None


@dataclass(frozen=True)
class PendingAction:
    type: str
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_booking_context(self) -> bool:
        return self.type == ACTION_NAVIGATE and bool(self.payload.get('bookingContext'))

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type, 'payload': self.payload}


class ActionTracker:
    """
    Holds the one action a request hands to the client.

    Results are recorded in the order the model requested the calls, round
    after round, and a later action replaces an earlier one. Results without
    an action (including failures) leave the captured action untouched.
    """

    def __init__(self):
        self.current: Optional[PendingAction] = None

    def record(self, results: Iterable) -> None:
        for result in results:
            if result.success and result.action is not None:
                self.current = result.action

    @property
    def skips_streaming(self) -> bool:
        """A booking navigation goes straight to the client without a written answer."""
        return self.current is not None and self.current.has_booking_context
