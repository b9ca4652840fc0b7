"""
Record-fetch collaborator.

Simulates an OpenAPI-described records service. The network latency is
an externally configured delay, not part of the fetch logic.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict


logger = logging.getLogger(__name__)

FETCH_MEDICAL_RECORDS = "fetchMedicalRecords"


class RecordFetcher(ABC):
    """Capability contract: fetch(operation_id, params) -> {status, data|error}."""

    @abstractmethod
    def fetch(self, operation_id: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Invoke a remote operation and return its status envelope."""


class SimulatedRecordFetcher(RecordFetcher):
    """
    In-process stand-in for the records API.

    Args:
        latency_s: Simulated network latency applied to every known operation
    """

    def __init__(self, latency_s: float = 0.5):
        self.latency_s = latency_s

    def fetch(self, operation_id: str, params: Dict[str, Any]) -> Dict[str, Any]:
        logger.info(f"[OpenAPI] POST /{operation_id} body={params}")
        if operation_id == FETCH_MEDICAL_RECORDS:
            if self.latency_s > 0:
                time.sleep(self.latency_s)
            patient_id = params.get("patientId", "unknown")
            return {
                "status": 200,
                "data": (
                    f"Patient {patient_id}: HR 72, BP 120/80, "
                    "Allergies: Penicillin, Recent Labs: Normal"
                ),
            }
        return {"status": 404, "error": "Operation not found"}
