from enum import Enum
from re import Pattern
from typing import Iterable

from .file_patterns import matches
from .tagging import (
    VOLTRON_PROCESSING_SUCCESS_VALUE,
    VOLTRON_PROCESSING_TAG_KEY,
    Tag,
    tag_exists,
)

CAT3_BUNDLE_KEY_MARKER = "CAT3_BUNDLE/"

PRIMARY_ROUTE_POLICY = "VOLTRON_COPY"
SECONDARY_ROUTE_POLICY = "CAT2_COPY"


class RoutingAction(Enum):
    ROUTE_TO_PRIMARY_DESTINATION = "VOLTRON_COPY"
    ROUTE_TO_SECONDARY_DESTINATION = "CAT2_COPY"
    NO_ACTION = "NONE"


def decide(
    object_key: str,
    tags: Iterable[Tag],
    policy_flag: str,
    transfer_exclusion_patterns: Iterable[Pattern[str]],
) -> RoutingAction:
    """
    Pick the single action for an object.

    Rules are checked in order and the first one to apply wins:

    1. CAT3 bundles go to Voltron when the policy is `VOLTRON_COPY`.
    2. Objects without a `VOLTRON-PROCESSING=SUCCESS` tag go to CAT2 when the policy is
       `CAT2_COPY`.
    3. Everything else is left alone.

    Files matching a transfer exclusion pattern are never routed.
    """
    if matches(object_key, transfer_exclusion_patterns):
        return RoutingAction.NO_ACTION

    is_cat3_bundle = CAT3_BUNDLE_KEY_MARKER in object_key
    if is_cat3_bundle and policy_flag == PRIMARY_ROUTE_POLICY:
        return RoutingAction.ROUTE_TO_PRIMARY_DESTINATION

    voltron_processed = tag_exists(
        tags, VOLTRON_PROCESSING_TAG_KEY, VOLTRON_PROCESSING_SUCCESS_VALUE
    )
    if not voltron_processed and policy_flag == SECONDARY_ROUTE_POLICY:
        return RoutingAction.ROUTE_TO_SECONDARY_DESTINATION

    return RoutingAction.NO_ACTION
