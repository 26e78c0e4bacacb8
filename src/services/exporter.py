"""Export services for profitability snapshots.

Saves a deal's snapshot to a timestamped JSON file for sharing and archiving.
"""

import json
import os
from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import quote

from src.core.logging import get_logger
from src.domain.models.rentabilite import RentabiliteSnapshot

log = get_logger(__name__)


class SnapshotExporter:
    """Handles exporting of profitability snapshots."""

    def __init__(self, output_dir: str = "results"):
        """Initialize exporter.

        Args:
            output_dir: Directory where exports will be saved.
        """
        self.output_dir = output_dir

    def _ensure_dir(self):
        """Ensure output directory exists."""
        if not os.path.exists(self.output_dir):
            os.makedirs(self.output_dir)
            log.info("created_output_directory", path=self.output_dir)

    def export(
        self,
        deal_id: str,
        snapshot: RentabiliteSnapshot,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Save a snapshot to a JSON file.

        Args:
            deal_id: Deal identifier, used in the filename.
            snapshot: Snapshot to export.
            metadata: Optional metadata to include in the file (e.g. deal title).

        Returns:
            Path to the saved file.
        """
        self._ensure_dir()
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"rentabilite_{quote(deal_id, safe='')}_{timestamp}.json"
        filepath = os.path.join(self.output_dir, filename)

        payload = {
            "metadata": {
                "exported_at": datetime.now().isoformat(),
                "deal_id": deal_id,
                "decision": snapshot.scenarios.base.decision.value,
                **(metadata or {}),
            },
            "snapshot": snapshot.to_record(),
        }

        try:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)

            log.info("snapshot_exported", path=filepath, deal_id=deal_id)
            return filepath

        except Exception as e:
            log.error("snapshot_export_failed", path=filepath, error=str(e))
            raise
