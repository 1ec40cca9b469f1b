from __future__ import annotations

import logging
from typing import Any
from uuid import uuid4

from src.event_handler.application.handlers.base import (
    Operation,
    SimulatedEventHandler,
    processed_by,
    utc_now,
)
from src.event_handler.domain.events.event_request import EventType
from src.event_handler.domain.models.results import (
    ConfigurationAppliedResult,
    ConfigurationChangedResult,
    ConfigurationRollbackResult,
    ConfigurationValidatedResult,
    StepOutcome,
    ValidationRule,
)

logger = logging.getLogger(__name__)

VALIDATION_STEPS = [
    "Parsing configuration value",
    "Checking type compatibility",
    "Validating constraints",
    "Testing configuration impact",
]

VALIDATION_RULES = [
    "required_fields",
    "type_validation",
    "range_validation",
    "dependency_check",
]

APPLICATION_STEPS = [
    "Loading configuration",
    "Backing up current state",
    "Applying changes",
    "Verifying application",
    "Updating cache",
]

ROLLBACK_STEPS = [
    "Identifying previous stable version",
    "Loading backup configuration",
    "Applying rollback",
    "Verifying system state",
    "Clearing invalid cache",
]


class ConfigurationEventHandler(SimulatedEventHandler):
    """Handles configuration change, validation, application and rollback events."""

    domain = "configuration"

    def operations(self) -> dict[str, Operation]:
        return {
            EventType.CONFIGURATION_CHANGED.value: self.configuration_changed,
            EventType.CONFIGURATION_VALIDATED.value: self.configuration_validated,
            EventType.CONFIGURATION_APPLIED.value: self.configuration_applied,
            EventType.CONFIGURATION_ROLLBACK.value: self.configuration_rollback,
        }

    async def configuration_changed(
        self, data: dict[str, Any], context: Any
    ) -> ConfigurationChangedResult:
        changed_at = utc_now()
        logger.info("Configuration changed", extra={"config_key": data.get("key")})
        validation = await self._run_steps(VALIDATION_STEPS, "passed", 50)
        return ConfigurationChangedResult(
            change_id=str(uuid4()),
            key=data.get("key"),
            previous_value=data.get("previousValue"),
            new_value=data.get("newValue"),
            validation=[StepOutcome(**outcome) for outcome in validation],
            changed_at=changed_at,
            processed_by=processed_by(context),
        )

    async def configuration_validated(
        self, data: dict[str, Any], context: Any
    ) -> ConfigurationValidatedResult:
        logger.info("Validating configuration")
        return ConfigurationValidatedResult(
            validation_id=str(uuid4()),
            configuration_name=data.get("name") or "workspace-config",
            rules=[ValidationRule(name=name) for name in VALIDATION_RULES],
            validated_at=utc_now(),
            processed_by=processed_by(context),
        )

    async def configuration_applied(
        self, data: dict[str, Any], context: Any
    ) -> ConfigurationAppliedResult:
        applied_at = utc_now()
        logger.info(
            "Applying configuration",
            extra={"configuration_id": data.get("configurationId") or "latest"},
        )
        steps = await self._run_steps(APPLICATION_STEPS, "completed", 100)
        return ConfigurationAppliedResult(
            application_id=str(uuid4()),
            configuration_id=data.get("configurationId") or str(uuid4()),
            environment=data.get("environment") or "development",
            steps=[StepOutcome(**outcome) for outcome in steps],
            applied_at=applied_at,
            processed_by=processed_by(context),
        )

    async def configuration_rollback(
        self, data: dict[str, Any], context: Any
    ) -> ConfigurationRollbackResult:
        rolled_back_at = utc_now()
        logger.info(
            "Rolling back configuration",
            extra={"configuration_id": data.get("configurationId") or "latest"},
        )
        steps = await self._run_steps(ROLLBACK_STEPS, "completed", 75)
        return ConfigurationRollbackResult(
            rollback_id=str(uuid4()),
            from_configuration_id=data.get("configurationId") or str(uuid4()),
            to_configuration_id=data.get("previousConfigurationId") or str(uuid4()),
            reason=data.get("reason") or "Manual rollback requested",
            steps=[StepOutcome(**outcome) for outcome in steps],
            rolled_back_at=rolled_back_at,
            processed_by=processed_by(context),
        )
