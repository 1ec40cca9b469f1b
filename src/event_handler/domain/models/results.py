from __future__ import annotations

from typing import Any

from pydantic import Field

from src.event_handler.domain.models.envelopes import CamelModel


class StepOutcome(CamelModel):
    """One simulated step of a multi-step workflow."""
    step: str
    status: str
    timestamp: str


class NumberedStep(CamelModel):
    step: int
    description: str
    status: str = "completed"


# Project results


class ProjectCreatedResult(CamelModel):
    project_id: str
    name: str | None = None
    type: str | None = None
    status: str = "created"
    created_at: str
    processed_by: str | None = None
    steps: list[NumberedStep]


class ProjectUpdatedResult(CamelModel):
    project_id: str
    name: str | None = None
    changes: dict[str, Any] = Field(default_factory=dict)
    status: str = "updated"
    updated_at: str
    processed_by: str | None = None


class ProjectDeletedResult(CamelModel):
    project_id: str
    name: str | None = None
    status: str = "deleted"
    deleted_at: str
    processed_by: str | None = None
    cleanup_steps: list[NumberedStep]


class BuildArtifact(CamelModel):
    type: str
    path: str
    size: int


class ProjectBuiltResult(CamelModel):
    build_id: str
    project_name: str | None = None
    build_number: int = 1
    status: str = "success"
    duration: int
    artifacts: list[BuildArtifact]
    completed_at: str
    processed_by: str | None = None


class ProjectDeployedResult(CamelModel):
    deployment_id: str
    project_name: str | None = None
    environment: str
    version: str
    status: str = "deployed"
    url: str
    deployed_at: str
    processed_by: str | None = None


# Configuration results


class ConfigurationChangedResult(CamelModel):
    change_id: str
    key: str | None = None
    previous_value: Any = None
    new_value: Any = None
    status: str = "changed"
    validation: list[StepOutcome]
    changed_at: str
    processed_by: str | None = None


class ValidationRule(CamelModel):
    name: str
    status: str = "passed"


class ConfigurationValidatedResult(CamelModel):
    validation_id: str
    configuration_name: str
    valid: bool = True
    rules: list[ValidationRule]
    validated_at: str
    processed_by: str | None = None


class ConfigurationAppliedResult(CamelModel):
    application_id: str
    configuration_id: str
    environment: str
    status: str = "applied"
    steps: list[StepOutcome]
    applied_at: str
    processed_by: str | None = None


class ConfigurationRollbackResult(CamelModel):
    rollback_id: str
    from_configuration_id: str
    to_configuration_id: str
    reason: str
    status: str = "rolled_back"
    steps: list[StepOutcome]
    rolled_back_at: str
    processed_by: str | None = None


# System results


class ServiceHealth(CamelModel):
    name: str
    status: str
    response_time: int


class HealthCheckResult(CamelModel):
    check_id: str
    status: str
    services: list[ServiceHealth]
    total_response_time: int
    checked_at: str
    processed_by: str | None = None


class MetricsResult(CamelModel):
    metrics_id: str
    period: str
    metrics: dict[str, dict[str, Any]]
    collected_at: str
    processed_by: str | None = None


class AlertAction(CamelModel):
    action: str
    status: str
    timestamp: str


class AlertResult(CamelModel):
    alert_id: str
    type: str
    severity: str
    message: str
    affected_resources: list[Any] = Field(default_factory=list)
    actions: list[AlertAction]
    triggered_at: str
    processed_by: str | None = None


class BackupStep(StepOutcome):
    size: int


class BackupResult(CamelModel):
    backup_id: str
    type: str
    status: str = "completed"
    size_in_mb: int = Field(alias="sizeInMB")
    location: str
    steps: list[BackupStep]
    completed_at: str
    processed_by: str | None = None


class MaintenanceTask(CamelModel):
    task: str
    status: str
    duration: int
    timestamp: str


class MaintenanceResult(CamelModel):
    maintenance_id: str
    type: str
    status: str = "completed"
    tasks: list[MaintenanceTask]
    total_duration: int
    completed_at: str
    processed_by: str | None = None
