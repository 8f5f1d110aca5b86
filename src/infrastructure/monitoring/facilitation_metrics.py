"""Facilitation metrics for Prometheus exposition.

This module provides Prometheus counters for queue activity, speaker
turns, votes, proposal decisions and incident reports. It implements
FacilitationMetricsProtocol so services can record through it directly.
"""

from __future__ import annotations

import os
import threading

from prometheus_client import CollectorRegistry, Counter

from src.domain.models.incident import IncidentType
from src.domain.models.proposal import ProposalStatus, VoteType
from src.domain.models.queue_item import QueueItemType

# Thread lock for singleton initialization
_metrics_lock = threading.Lock()

VALID_RESOLUTIONS = ("automatic", "withdrawn", "override")


class FacilitationMetricsCollector:
    """Collects facilitation metrics for Prometheus.

    This collector tracks:
    - Speaking requests joining the stack, by item type
    - Speaker turns started
    - Votes cast, by vote type
    - Proposal status changes, by new status and how it was reached
    - Safety incidents reported, by type and urgency

    Attributes:
        queue_joins_total: Counter for joins with item_type label.
        speaker_turns_total: Counter for started speakers.
        votes_total: Counter for votes with vote_type label.
        proposal_decisions_total: Counter for status changes with status
            and resolution labels.
        incident_reports_total: Counter for incidents with incident_type
            and urgent labels.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize facilitation metrics collector.

        Args:
            registry: Optional custom registry for testing isolation.
        """
        self._registry = registry or CollectorRegistry()
        self._environment = os.environ.get("ENVIRONMENT", "development")
        self._service_name = os.environ.get("SERVICE_NAME", "stack-keeper")

        self.queue_joins_total = Counter(
            name="stack_queue_joins_total",
            documentation="Total speaking requests joining the stack by item type",
            labelnames=["item_type", "service", "environment"],
            registry=self._registry,
        )

        self.speaker_turns_total = Counter(
            name="stack_speaker_turns_total",
            documentation="Total speaker turns started",
            labelnames=["service", "environment"],
            registry=self._registry,
        )

        self.votes_total = Counter(
            name="stack_votes_total",
            documentation="Total votes cast or changed by vote type",
            labelnames=["vote_type", "service", "environment"],
            registry=self._registry,
        )

        # resolution: automatic (vote evaluation), withdrawn, override
        self.proposal_decisions_total = Counter(
            name="stack_proposal_decisions_total",
            documentation="Total proposal status changes by status and resolution",
            labelnames=["status", "resolution", "service", "environment"],
            registry=self._registry,
        )

        self.incident_reports_total = Counter(
            name="stack_incident_reports_total",
            documentation="Total safety incidents reported by type and urgency",
            labelnames=["incident_type", "urgent", "service", "environment"],
            registry=self._registry,
        )

    @property
    def service_name(self) -> str:
        return self._service_name

    @property
    def environment(self) -> str:
        return self._environment

    def record_queue_join(self, item_type: QueueItemType) -> None:
        """Record a speaking request joining the stack.

        Args:
            item_type: Type of the new item.
        """
        self.queue_joins_total.labels(
            item_type=item_type.value,
            service=self._service_name,
            environment=self._environment,
        ).inc()

    def record_speaker_turn(self) -> None:
        self.speaker_turns_total.labels(
            service=self._service_name,
            environment=self._environment,
        ).inc()

    def record_vote(self, vote_type: VoteType) -> None:
        self.votes_total.labels(
            vote_type=vote_type.value,
            service=self._service_name,
            environment=self._environment,
        ).inc()

    def record_proposal_decision(self, status: ProposalStatus, resolution: str) -> None:
        """Record a proposal changing status.

        Args:
            status: New status of the proposal.
            resolution: automatic, withdrawn or override.

        Raises:
            ValueError: If resolution is not a known resolution.
        """
        if resolution not in VALID_RESOLUTIONS:
            raise ValueError(
                f"Invalid resolution '{resolution}'. Must be one of {VALID_RESOLUTIONS}."
            )

        self.proposal_decisions_total.labels(
            status=status.value,
            resolution=resolution,
            service=self._service_name,
            environment=self._environment,
        ).inc()

    def record_incident_report(self, incident_type: IncidentType, urgent: bool) -> None:
        self.incident_reports_total.labels(
            incident_type=incident_type.value,
            urgent=str(urgent).lower(),
            service=self._service_name,
            environment=self._environment,
        ).inc()

    def get_registry(self) -> CollectorRegistry:
        """Get the collector registry.

        Returns:
            The Prometheus collector registry.
        """
        return self._registry


# Singleton instance
_facilitation_metrics_collector: FacilitationMetricsCollector | None = None


def get_facilitation_metrics_collector() -> FacilitationMetricsCollector:
    """Get the singleton FacilitationMetricsCollector instance (thread-safe).

    Uses double-checked locking pattern for thread-safe lazy initialization.

    Returns:
        The global FacilitationMetricsCollector instance.
    """
    global _facilitation_metrics_collector
    if _facilitation_metrics_collector is None:
        with _metrics_lock:
            # Double-check inside lock
            if _facilitation_metrics_collector is None:
                _facilitation_metrics_collector = FacilitationMetricsCollector()
    return _facilitation_metrics_collector


def reset_facilitation_metrics_collector() -> None:
    """Reset the singleton collector (for testing only)."""
    global _facilitation_metrics_collector
    with _metrics_lock:
        _facilitation_metrics_collector = None
