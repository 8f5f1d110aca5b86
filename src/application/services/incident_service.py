"""Safety incident reporting for meetings.

Any user may report an incident in an existing meeting, anonymously if
they choose; an anonymous report is stored without its reporter. Urgent
reports open in INVESTIGATING and are logged with the facilitators who
must act on them. Listing, status updates and statistics are restricted
to the meeting's facilitators.
"""

from __future__ import annotations

from collections import Counter
from uuid import UUID, uuid4

import structlog

from src.application.ports.facilitation_metrics import FacilitationMetricsProtocol
from src.application.ports.incident_repository import IncidentRepositoryProtocol
from src.application.ports.meeting_repository import MeetingRepositoryProtocol
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.domain.errors import (
    FacilitatorRequiredError,
    IncidentNotFoundError,
    InvalidIncidentReportError,
    InvalidIncidentStatusError,
    MeetingNotFoundError,
)
from src.domain.models.incident import (
    IncidentReport,
    IncidentStats,
    IncidentStatus,
    IncidentStatusChange,
    IncidentType,
)

logger = structlog.get_logger(__name__)


def parse_incident_type(value: IncidentType | str | None) -> IncidentType:
    """Coerce an incident type, accepting either case of its name.

    Raises:
        InvalidIncidentReportError: If ``value`` names no IncidentType.
    """
    if isinstance(value, IncidentType):
        return value
    if isinstance(value, str):
        try:
            return IncidentType(value.lower())
        except ValueError:
            pass
    raise InvalidIncidentReportError("type", value)


def parse_incident_status(value: IncidentStatus | str) -> IncidentStatus:
    """Coerce an incident status name.

    Raises:
        InvalidIncidentStatusError: If ``value`` names no IncidentStatus.
    """
    if isinstance(value, IncidentStatus):
        return value
    try:
        return IncidentStatus(value)
    except ValueError:
        raise InvalidIncidentStatusError(value) from None


class IncidentService:
    """Records safety incidents and lets facilitators triage them.

    Example:
        >>> service = IncidentService(
        ...     incident_repository=incident_repo,
        ...     meeting_repository=meeting_repo,
        ...     time_authority=time_authority,
        ... )
        >>> incident = await service.report_incident(
        ...     meeting_id, None, "harassment", "Repeated interruptions",
        ...     urgent=True, anonymous=True,
        ... )
        >>> incident.status
        <IncidentStatus.INVESTIGATING: 'INVESTIGATING'>
    """

    def __init__(
        self,
        incident_repository: IncidentRepositoryProtocol,
        meeting_repository: MeetingRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
        metrics: FacilitationMetricsProtocol | None = None,
    ) -> None:
        self._incident_repository = incident_repository
        self._meeting_repository = meeting_repository
        self._time = time_authority
        self._metrics = metrics

    async def report_incident(
        self,
        meeting_id: UUID,
        reporter_id: UUID | None,
        incident_type: IncidentType | str | None,
        description: str,
        urgent: bool = False,
        anonymous: bool = False,
    ) -> IncidentReport:
        """Record a new incident.

        Args:
            meeting_id: Meeting the incident happened in. May have ended.
            reporter_id: Reporting user. Dropped when ``anonymous``.
            incident_type: An IncidentType or its name.
            description: Reporter's account. Must not be blank.
            urgent: Open the incident in INVESTIGATING.
            anonymous: Store no reporter.

        Returns:
            The stored incident.

        Raises:
            MeetingNotFoundError: Meeting does not exist.
            InvalidIncidentReportError: Unknown type or blank description.
        """
        log = logger.bind(meeting_id=str(meeting_id))

        try:
            resolved_type = parse_incident_type(incident_type)
        except InvalidIncidentReportError:
            log.warning("incident_rejected", reason="invalid_type", incident_type=incident_type)
            raise
        if not description or not description.strip():
            log.warning("incident_rejected", reason="blank_description")
            raise InvalidIncidentReportError("description", description)

        if await self._meeting_repository.get(meeting_id) is None:
            log.warning("meeting_not_found")
            raise MeetingNotFoundError(meeting_id)

        incident = IncidentReport(
            id=uuid4(),
            meeting_id=meeting_id,
            reporter_id=None if anonymous else reporter_id,
            type=resolved_type,
            description=description.strip(),
            urgent=urgent,
            anonymous=anonymous,
            status=IncidentStatus.INVESTIGATING if urgent else IncidentStatus.OPEN,
            created_at=self._time.now(),
        )
        await self._incident_repository.save(incident)

        if self._metrics is not None:
            self._metrics.record_incident_report(resolved_type, urgent)
        log.info(
            "incident_reported",
            incident_id=str(incident.id),
            incident_type=resolved_type.value,
            urgent=urgent,
            anonymous=anonymous,
        )

        if urgent:
            active = await self._meeting_repository.list_active_participants(meeting_id)
            log.warning(
                "urgent_incident_reported",
                incident_id=str(incident.id),
                facilitator_ids=sorted(str(p.user_id) for p in active if p.is_facilitator),
            )
        return incident

    async def list_incidents(
        self, meeting_id: UUID, requesting_user_id: UUID
    ) -> list[IncidentReport]:
        """Return the meeting's incidents, newest first.

        Raises:
            FacilitatorRequiredError: Requester is not a facilitator.
        """
        log = logger.bind(meeting_id=str(meeting_id), user_id=str(requesting_user_id))
        await self._require_facilitator(meeting_id, requesting_user_id, "list incidents", log)
        return await self._incident_repository.list_by_meeting(meeting_id)

    async def update_status(
        self,
        incident_id: UUID,
        facilitator_id: UUID,
        status: IncidentStatus | str,
        notes: str | None = None,
    ) -> IncidentReport:
        """Move an incident to ``status`` and append the change to its history.

        Any status may follow any other, including the current one.

        Raises:
            InvalidIncidentStatusError: Unknown status.
            IncidentNotFoundError: Incident does not exist.
            FacilitatorRequiredError: Caller is not a facilitator of the
                incident's meeting.
        """
        log = logger.bind(incident_id=str(incident_id), facilitator_id=str(facilitator_id))

        try:
            resolved_status = parse_incident_status(status)
        except InvalidIncidentStatusError:
            log.warning("incident_update_rejected", reason="invalid_status", status=status)
            raise

        incident = await self._incident_repository.get(incident_id)
        if incident is None:
            log.warning("incident_not_found")
            raise IncidentNotFoundError(incident_id)
        await self._require_facilitator(
            incident.meeting_id, facilitator_id, "update incident", log
        )

        updated = incident.with_status(
            IncidentStatusChange(
                status=resolved_status,
                facilitator_id=facilitator_id,
                recorded_at=self._time.now(),
                notes=notes,
            )
        )
        await self._incident_repository.update(updated)

        log.info(
            "incident_status_updated",
            from_status=incident.status.value,
            to_status=resolved_status.value,
        )
        return updated

    async def get_stats(self, meeting_id: UUID, requesting_user_id: UUID) -> IncidentStats:
        """Count the meeting's incidents in total, urgent, and per status.

        Raises:
            FacilitatorRequiredError: Requester is not a facilitator.
        """
        log = logger.bind(meeting_id=str(meeting_id), user_id=str(requesting_user_id))
        await self._require_facilitator(meeting_id, requesting_user_id, "incident stats", log)

        incidents = await self._incident_repository.list_by_meeting(meeting_id)
        return IncidentStats(
            total=len(incidents),
            urgent=sum(1 for incident in incidents if incident.urgent),
            by_status=dict(Counter(incident.status for incident in incidents)),
        )

    async def _require_facilitator(
        self,
        meeting_id: UUID,
        user_id: UUID,
        operation: str,
        log,
    ) -> None:
        participant = await self._meeting_repository.get_participant(meeting_id, user_id)
        if participant is None or not participant.is_facilitator:
            log.warning("facilitator_required", operation=operation)
            raise FacilitatorRequiredError(meeting_id, user_id, operation)
