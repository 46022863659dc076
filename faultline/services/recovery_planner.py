"""Recovery plan selection for classified errors."""

from collections.abc import Mapping
from copy import deepcopy
from typing import Optional

from faultline.models.error import ErrorRecord, ErrorType
from faultline.models.recovery import RecoveryPlan
from faultline.services.catalog import ErrorCatalog


class RecoveryPlanner:
    """Maps an error record to a fresh recovery plan."""

    def __init__(self, catalog: Optional[ErrorCatalog] = None):
        self.catalog = catalog or ErrorCatalog()

    def plan(self, record: ErrorRecord, context: Optional[Mapping] = None) -> RecoveryPlan:
        """
        Recovery plan for a record.

        Validation errors carry the caller's ``validationRules`` from the
        original, unsanitized context.

        Args:
            record: Classified error record
            context: Original request context

        Returns:
            New RecoveryPlan, never shared between calls
        """
        plan = self.catalog.recovery_template(record.type)

        if record.type == ErrorType.VALIDATION_ERROR:
            rules = context.get("validationRules") if isinstance(context, Mapping) else None
            plan.validation_rules = _as_rule_list(rules)

        return plan


def _as_rule_list(rules) -> list:
    if rules is None:
        return []
    if isinstance(rules, (list, tuple)):
        return deepcopy(list(rules))
    return [deepcopy(rules)]
