"""Resource status lifecycle.

The apply engine drives these transitions; this module only defines the legal
state set and validates changes against it.

Besides the forward provisioning path the table carries one deliberate
addition: ``failed -> pending_creation``, so a failed resource can
be re-queued for the next apply pass. Every other move out of ``failed``,
including straight to ``applied``, is rejected.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from shipyard.core.errors import InvalidTransitionError

if TYPE_CHECKING:
    from shipyard.core.schema import Resource

logger = logging.getLogger(__name__)


class Status(str, Enum):
    """Provisioning status of a resource."""

    PENDING_CREATION = "pending_creation"
    APPLIED = "applied"
    PENDING_MODIFICATION = "pending_modification"
    FAILED = "failed"


TRANSITIONS: dict[Status, frozenset[Status]] = {
    Status.PENDING_CREATION: frozenset({Status.APPLIED, Status.FAILED}),
    Status.APPLIED: frozenset({Status.PENDING_MODIFICATION}),
    Status.PENDING_MODIFICATION: frozenset({Status.APPLIED, Status.FAILED}),
    # A failed resource is re-queued for the next apply pass
    Status.FAILED: frozenset({Status.PENDING_CREATION}),
}


def allowed_transitions(current: Status) -> frozenset[Status]:
    """Statuses reachable from ``current`` in one step."""
    return TRANSITIONS[Status(current)]


def can_transition(current: Status, target: Status) -> bool:
    return Status(target) in allowed_transitions(current)


def is_terminal(status: Status) -> bool:
    """True when the status ends an apply pass."""
    return Status(status) in (Status.APPLIED, Status.FAILED)


def transition(resource: Resource, target: Status) -> Resource:
    """
    Move a resource to a new status in place.

    Raises:
        InvalidTransitionError: if the change skips a step of the lifecycle
    """
    target = Status(target)
    current = resource.status
    if not can_transition(current, target):
        raise InvalidTransitionError(resource.address, current, target)

    logger.debug("%s: %s -> %s", resource.address, current.value, target.value)
    resource.status = target
    return resource
