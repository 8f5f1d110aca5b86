"""Meeting export in JSON, CSV and Markdown.

Exports cover the meeting record, its participants, the full queue
history in creation order, and every proposal with its votes. Users are
identified by id; display names live outside this core.
"""

from __future__ import annotations

import csv
import io
import json
from enum import Enum
from typing import Any
from uuid import UUID

import structlog

from src.application.ports.meeting_repository import MeetingRepositoryProtocol
from src.application.ports.proposal_repository import ProposalRepositoryProtocol
from src.application.ports.queue_item_repository import QueueItemRepositoryProtocol
from src.domain.errors import InvalidExportFormatError, MeetingNotFoundError
from src.domain.models.meeting import Meeting, Participant
from src.domain.models.proposal import Proposal, Vote
from src.domain.models.queue_item import QueueItem

logger = structlog.get_logger(__name__)


class ExportFormat(Enum):
    JSON = "json"
    CSV = "csv"
    MARKDOWN = "markdown"


def parse_export_format(value: ExportFormat | str) -> ExportFormat:
    if isinstance(value, ExportFormat):
        return value
    try:
        return ExportFormat(str(value).lower())
    except ValueError:
        raise InvalidExportFormatError(value) from None


class MeetingExportService:
    """Renders a meeting's record for download.

    Attributes:
        CSV_HEADERS: Column order of the CSV export.
    """

    CSV_HEADERS = ["Type", "Timestamp", "User", "Content", "Status"]

    def __init__(
        self,
        meeting_repository: MeetingRepositoryProtocol,
        queue_repository: QueueItemRepositoryProtocol,
        proposal_repository: ProposalRepositoryProtocol,
    ) -> None:
        self._meeting_repository = meeting_repository
        self._queue_repository = queue_repository
        self._proposal_repository = proposal_repository

    async def export_meeting(
        self,
        meeting_id: UUID,
        export_format: ExportFormat | str = ExportFormat.JSON,
    ) -> str:
        """Export the meeting in the requested format.

        Args:
            meeting_id: Meeting to export.
            export_format: ExportFormat or its name ("json", "csv", "markdown").

        Returns:
            The rendered document.

        Raises:
            InvalidExportFormatError: Unsupported format.
            MeetingNotFoundError: Meeting does not exist.
        """
        resolved = parse_export_format(export_format)
        snapshot = await self._load(meeting_id)

        if resolved == ExportFormat.CSV:
            rendered = self._render_csv(*snapshot)
        elif resolved == ExportFormat.MARKDOWN:
            rendered = self._render_markdown(*snapshot)
        else:
            rendered = json.dumps(self._to_dict(*snapshot), indent=2)

        logger.info(
            "meeting_exported",
            meeting_id=str(meeting_id),
            export_format=resolved.value,
            size=len(rendered),
        )
        return rendered

    async def _load(
        self, meeting_id: UUID
    ) -> tuple[Meeting, list[Participant], list[QueueItem], list[tuple[Proposal, list[Vote]]]]:
        meeting = await self._meeting_repository.get(meeting_id)
        if meeting is None:
            logger.warning("meeting_not_found", meeting_id=str(meeting_id))
            raise MeetingNotFoundError(meeting_id)

        participants = await self._meeting_repository.list_participants(meeting_id)
        items = await self._queue_repository.list_by_meeting(meeting_id)
        proposals = sorted(
            await self._proposal_repository.list_by_meeting(meeting_id),
            key=lambda proposal: proposal.created_at,
        )
        with_votes = [
            (proposal, await self._proposal_repository.list_votes(proposal.id))
            for proposal in proposals
        ]
        return meeting, participants, items, with_votes

    @staticmethod
    def _to_dict(
        meeting: Meeting,
        participants: list[Participant],
        items: list[QueueItem],
        proposals: list[tuple[Proposal, list[Vote]]],
    ) -> dict[str, Any]:
        settings = meeting.settings
        return {
            "id": str(meeting.id),
            "title": meeting.title,
            "description": meeting.description,
            "pin": meeting.pin,
            "is_active": meeting.is_active,
            "created_at": meeting.created_at.isoformat(),
            "ended_at": _isoformat(meeting.ended_at),
            "settings": {
                "progressive_stack": settings.progressive_stack,
                "direct_response_window_sec": settings.direct_response_window_sec,
                "max_direct_responses_per_user": settings.max_direct_responses_per_user,
                "time_per_speaker_sec": settings.time_per_speaker_sec,
                "invite_tags": sorted(settings.invite_tags),
            },
            "participants": [
                {
                    "user_id": str(participant.user_id),
                    "role": participant.role.value,
                    "joined_at": participant.joined_at.isoformat(),
                    "left_at": _isoformat(participant.left_at),
                }
                for participant in participants
            ],
            "queue_items": [
                {
                    "id": str(item.id),
                    "user_id": str(item.user_id),
                    "type": item.type.value if item.type else None,
                    "status": item.status.value,
                    "created_at": item.created_at.isoformat(),
                    "started_at": _isoformat(item.started_at),
                    "completed_at": _isoformat(item.completed_at),
                    "tags": sorted(item.tags),
                    "audit_trail": [
                        {
                            "kind": entry.kind.value,
                            "actor_id": str(entry.actor_id),
                            "recorded_at": entry.recorded_at.isoformat(),
                            "reason": entry.reason,
                            "requested_position": entry.requested_position,
                        }
                        for entry in item.audit_trail
                    ],
                }
                for item in items
            ],
            "proposals": [
                {
                    "id": str(proposal.id),
                    "proposer_id": str(proposal.proposer_id),
                    "title": proposal.title,
                    "description": proposal.description,
                    "status": proposal.status.value,
                    "created_at": proposal.created_at.isoformat(),
                    "decided_at": _isoformat(proposal.decided_at),
                    "votes": [
                        {
                            "user_id": str(vote.user_id),
                            "vote_type": vote.vote_type.value,
                            "rationale": vote.rationale,
                            "created_at": vote.created_at.isoformat(),
                            "updated_at": vote.updated_at.isoformat(),
                        }
                        for vote in votes
                    ],
                }
                for proposal, votes in proposals
            ],
        }

    def _render_csv(
        self,
        meeting: Meeting,
        participants: list[Participant],
        items: list[QueueItem],
        proposals: list[tuple[Proposal, list[Vote]]],
    ) -> str:
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")
        writer.writerow(self.CSV_HEADERS)

        for item in items:
            writer.writerow(
                [
                    item.type.value if item.type else "",
                    item.created_at.isoformat(),
                    str(item.user_id),
                    "Queue item",
                    item.status.value,
                ]
            )

        for proposal, votes in proposals:
            writer.writerow(
                [
                    "PROPOSAL",
                    proposal.created_at.isoformat(),
                    str(proposal.proposer_id),
                    proposal.title,
                    proposal.status.value,
                ]
            )
            for vote in votes:
                writer.writerow(
                    [
                        "VOTE",
                        vote.created_at.isoformat(),
                        str(vote.user_id),
                        vote.vote_type.value,
                        "RECORDED",
                    ]
                )

        return output.getvalue()

    @staticmethod
    def _render_markdown(
        meeting: Meeting,
        participants: list[Participant],
        items: list[QueueItem],
        proposals: list[tuple[Proposal, list[Vote]]],
    ) -> str:
        lines = [
            f"# {meeting.title}",
            "",
            f"**Meeting Date:** {meeting.created_at.isoformat()}",
            f"**Status:** {'Active' if meeting.is_active else 'Ended'}",
            "",
            "## Participants",
        ]
        lines.extend(
            f"- {participant.user_id} ({participant.role.value})"
            for participant in participants
        )
        lines.append("")

        lines.append("## Speaking Queue History")
        for index, item in enumerate(items, start=1):
            item_type = item.type.value if item.type else "UNKNOWN"
            lines.append(f"{index}. **{item.user_id}** - {item_type} ({item.status.value})")
        lines.append("")

        lines.append("## Proposals and Decisions")
        for proposal, votes in proposals:
            lines.append(f"### {proposal.title}")
            lines.append(f"**Status:** {proposal.status.value}")
            lines.append(f"**Proposed by:** {proposal.proposer_id}")
            lines.append("")
            lines.append("**Votes:**")
            lines.extend(f"- {vote.user_id}: {vote.vote_type.value}" for vote in votes)
            lines.append("")

        return "\n".join(lines)


def _isoformat(value) -> str | None:
    return value.isoformat() if value is not None else None
