"""Contract status workflow - forward-only Murabaha lifecycle"""

from enum import Enum
from typing import Dict, Optional

from murabaha_gateway.domain.exceptions import InvalidStatusError, InvalidTransitionError


class ContractStatus(str, Enum):
    """Lifecycle stages of a Murabaha contract"""

    DRAFT = "DRAFT"
    PROMISE = "PROMISE"  # Wa'd signed by the client
    ASSET_OWNED = "ASSET_OWNED"  # bank has acquired the asset
    SALE_SIGNED = "SALE_SIGNED"  # Murabaha sale executed


# Each status may only advance to the next stage
TRANSITIONS: Dict[ContractStatus, Optional[ContractStatus]] = {
    ContractStatus.DRAFT: ContractStatus.PROMISE,
    ContractStatus.PROMISE: ContractStatus.ASSET_OWNED,
    ContractStatus.ASSET_OWNED: ContractStatus.SALE_SIGNED,
    ContractStatus.SALE_SIGNED: None,
}

VALID_STATUSES = [status.value for status in ContractStatus]


def parse_status(value: str) -> ContractStatus:
    """Map a wire status string to ContractStatus"""
    try:
        return ContractStatus(value)
    except ValueError:
        raise InvalidStatusError(f"Invalid status. Must be one of: {', '.join(VALID_STATUSES)}")


def next_status(current: ContractStatus) -> Optional[ContractStatus]:
    return TRANSITIONS[current]


def validate_transition(current: str, target: str) -> ContractStatus:
    """
    Check a requested status change against the transition table.

    Raises:
        InvalidStatusError: target (or stored current) is not a known status
        InvalidTransitionError: target is not the immediate successor
    """
    target_status = parse_status(target)
    current_status = parse_status(current)

    allowed = next_status(current_status)
    if target_status != allowed:
        if allowed is None:
            raise InvalidTransitionError(f"Contract is already {current_status.value}")
        raise InvalidTransitionError(
            f"Cannot move from {current_status.value} to {target_status.value}; next status is {allowed.value}"
        )

    return target_status
