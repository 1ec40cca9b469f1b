from __future__ import annotations

import logging
import random
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
    BuildArtifact,
    NumberedStep,
    ProjectBuiltResult,
    ProjectCreatedResult,
    ProjectDeletedResult,
    ProjectDeployedResult,
    ProjectUpdatedResult,
)

logger = logging.getLogger(__name__)

CREATION_STEPS = [
    "Validating project configuration",
    "Setting up project structure",
    "Initializing git repository",
    "Installing dependencies",
    "Running initial build",
]

CLEANUP_STEPS = [
    "Backing up project data",
    "Removing build artifacts",
    "Cleaning up dependencies",
    "Removing project files",
]


def _numbered(steps: list[str]) -> list[NumberedStep]:
    return [NumberedStep(step=index, description=step) for index, step in enumerate(steps, start=1)]


class ProjectEventHandler(SimulatedEventHandler):
    """Handles project lifecycle events."""

    domain = "project"

    def operations(self) -> dict[str, Operation]:
        return {
            EventType.PROJECT_CREATED.value: self.project_created,
            EventType.PROJECT_UPDATED.value: self.project_updated,
            EventType.PROJECT_DELETED.value: self.project_deleted,
            EventType.PROJECT_BUILT.value: self.project_built,
            EventType.PROJECT_DEPLOYED.value: self.project_deployed,
        }

    async def project_created(self, data: dict[str, Any], context: Any) -> ProjectCreatedResult:
        created_at = utc_now()
        logger.info("Creating project", extra={"project_name": data.get("name")})
        await self._run_steps(CREATION_STEPS, "completed", 100)
        return ProjectCreatedResult(
            project_id=str(uuid4()),
            name=data.get("name"),
            type=data.get("type"),
            created_at=created_at,
            processed_by=processed_by(context),
            steps=_numbered(CREATION_STEPS),
        )

    async def project_updated(self, data: dict[str, Any], context: Any) -> ProjectUpdatedResult:
        logger.info(
            "Updating project",
            extra={"project_ref": data.get("projectId") or data.get("name")},
        )
        return ProjectUpdatedResult(
            project_id=data.get("projectId") or str(uuid4()),
            name=data.get("name"),
            changes=data.get("changes") or {},
            updated_at=utc_now(),
            processed_by=processed_by(context),
        )

    async def project_deleted(self, data: dict[str, Any], context: Any) -> ProjectDeletedResult:
        deleted_at = utc_now()
        logger.info(
            "Deleting project",
            extra={"project_ref": data.get("projectId") or data.get("name")},
        )
        await self._run_steps(CLEANUP_STEPS, "completed", 50)
        return ProjectDeletedResult(
            project_id=data.get("projectId") or str(uuid4()),
            name=data.get("name"),
            deleted_at=deleted_at,
            processed_by=processed_by(context),
            cleanup_steps=_numbered(CLEANUP_STEPS),
        )

    async def project_built(self, data: dict[str, Any], context: Any) -> ProjectBuiltResult:
        project_name = data.get("projectName")
        logger.info("Processing build event", extra={"project_name": project_name})
        return ProjectBuiltResult(
            build_id=str(uuid4()),
            project_name=project_name,
            build_number=data.get("buildNumber") or 1,
            duration=data.get("duration") or random.randrange(30_000),
            artifacts=[
                BuildArtifact(
                    type="dist",
                    path=f"dist/{project_name}",
                    size=random.randrange(1_000_000),
                )
            ],
            completed_at=utc_now(),
            processed_by=processed_by(context),
        )

    async def project_deployed(self, data: dict[str, Any], context: Any) -> ProjectDeployedResult:
        project_name = data.get("projectName")
        environment = data.get("environment")
        logger.info("Processing deployment event", extra={"project_name": project_name})
        return ProjectDeployedResult(
            deployment_id=str(uuid4()),
            project_name=project_name,
            environment=environment or "development",
            version=data.get("version") or "1.0.0",
            url=f"https://{project_name}-{environment or 'dev'}.example.com",
            deployed_at=utc_now(),
            processed_by=processed_by(context),
        )
