from __future__ import annotations

import logging
import random
from datetime import UTC, datetime
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
    AlertAction,
    AlertResult,
    BackupResult,
    BackupStep,
    HealthCheckResult,
    MaintenanceResult,
    MaintenanceTask,
    MetricsResult,
    ServiceHealth,
)

logger = logging.getLogger(__name__)

# (service name, simulated response time in ms)
MONITORED_SERVICES = [
    ("database", 45),
    ("cache", 12),
    ("storage", 89),
    ("queue", 23),
    ("api", 156),
]

ALERT_ACTIONS = [
    "Validating alert conditions",
    "Checking alert thresholds",
    "Identifying affected resources",
    "Notifying on-call team",
    "Creating incident ticket",
]

BACKUP_STEPS = [
    "Creating snapshot",
    "Compressing data",
    "Encrypting backup",
    "Uploading to storage",
    "Verifying backup integrity",
]

MAINTENANCE_TASKS = [
    "Clearing temporary files",
    "Optimizing database",
    "Updating dependencies",
    "Rotating logs",
    "Refreshing caches",
]

SAMPLE_METRICS: dict[str, dict[str, Any]] = {
    "cpu": {"average": 45.2, "peak": 78.3, "unit": "percent"},
    "memory": {"used": 2.3, "available": 5.7, "total": 8.0, "unit": "GB"},
    "requests": {"total": 15234, "success": 14987, "errors": 247, "unit": "count"},
    "responseTime": {"average": 145, "p50": 98, "p95": 412, "p99": 892, "unit": "ms"},
    "throughput": {"read": 45.6, "write": 23.4, "unit": "MB/s"},
}


class SystemEventHandler(SimulatedEventHandler):
    """Handles system-level events: health checks, metrics, alerts, backups, maintenance."""

    domain = "system"

    def operations(self) -> dict[str, Operation]:
        return {
            EventType.SYSTEM_HEALTH_CHECK.value: self.health_check,
            EventType.SYSTEM_METRICS.value: self.metrics,
            EventType.SYSTEM_ALERT.value: self.alert,
            EventType.SYSTEM_BACKUP.value: self.backup,
            EventType.SYSTEM_MAINTENANCE.value: self.maintenance,
        }

    async def health_check(self, data: dict[str, Any], context: Any) -> HealthCheckResult:
        checked_at = utc_now()
        services = [
            ServiceHealth(name=name, status="healthy", response_time=response_time)
            for name, response_time in MONITORED_SERVICES
        ]
        for service in services:
            logger.debug(
                "Checking service",
                extra={"service_name": service.name, "service_status": service.status},
            )
            await self._simulate_delay(service.response_time)

        all_healthy = all(service.status == "healthy" for service in services)
        return HealthCheckResult(
            check_id=str(uuid4()),
            status="healthy" if all_healthy else "degraded",
            services=services,
            total_response_time=sum(service.response_time for service in services),
            checked_at=checked_at,
            processed_by=processed_by(context),
        )

    async def metrics(self, data: dict[str, Any], context: Any) -> MetricsResult:
        period = data.get("period") or "last_hour"
        logger.info("Collecting metrics", extra={"period": period})
        return MetricsResult(
            metrics_id=str(uuid4()),
            period=period,
            metrics={name: dict(values) for name, values in SAMPLE_METRICS.items()},
            collected_at=utc_now(),
            processed_by=processed_by(context),
        )

    async def alert(self, data: dict[str, Any], context: Any) -> AlertResult:
        triggered_at = utc_now()
        logger.info(
            "Processing alert",
            extra={"alert_type": data.get("type"), "severity": data.get("severity")},
        )
        actions = []
        for action in ALERT_ACTIONS:
            actions.append(AlertAction(action=action, status="completed", timestamp=utc_now()))
            await self._simulate_delay(100)

        return AlertResult(
            alert_id=str(uuid4()),
            type=data.get("type") or "performance",
            severity=data.get("severity") or "warning",
            message=data.get("message") or "System alert triggered",
            affected_resources=data.get("resources") or [],
            actions=actions,
            triggered_at=triggered_at,
            processed_by=processed_by(context),
        )

    async def backup(self, data: dict[str, Any], context: Any) -> BackupResult:
        backup_id = str(uuid4())
        backup_type = data.get("type") or "full"
        completed_at = utc_now()
        logger.info("Initiating backup", extra={"backup_type": backup_type})

        steps = []
        for step in BACKUP_STEPS:
            steps.append(
                BackupStep(
                    step=step,
                    status="completed",
                    size=random.randrange(500),
                    timestamp=utc_now(),
                )
            )
            await self._simulate_delay(200)

        today = datetime.now(tz=UTC).date().isoformat()
        return BackupResult(
            backup_id=backup_id,
            type=backup_type,
            size_in_mb=sum(step.size for step in steps),
            location=f"s3://backups/{today}/{backup_id}",
            steps=steps,
            completed_at=completed_at,
            processed_by=processed_by(context),
        )

    async def maintenance(self, data: dict[str, Any], context: Any) -> MaintenanceResult:
        maintenance_type = data.get("type") or "routine"
        completed_at = utc_now()
        logger.info("Starting maintenance", extra={"maintenance_type": maintenance_type})

        tasks = []
        for task in MAINTENANCE_TASKS:
            tasks.append(
                MaintenanceTask(
                    task=task,
                    status="completed",
                    duration=random.randrange(5000),
                    timestamp=utc_now(),
                )
            )
            await self._simulate_delay(150)

        return MaintenanceResult(
            maintenance_id=str(uuid4()),
            type=maintenance_type,
            tasks=tasks,
            total_duration=sum(task.duration for task in tasks),
            completed_at=completed_at,
            processed_by=processed_by(context),
        )
