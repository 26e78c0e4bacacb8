"""Unit tests for legacy record migration."""

import json

from src.domain.models.rentabilite import Decision, RentabiliteSnapshot, Strategy
from src.services.migration import migrate_deal_context_record, migrate_snapshot_record
from src.services.snapshot_store import DEFAULT_PREFIX

LEGACY_RESULT = {
    "fraisNotaire": 16000,
    "coutTotal": 251000,
    "margeBrute": 49000,
    "margePct": 19.52,
    "roiPct": 98,
    "triPct": 19.52,
    "cashflowMensuel": 0,
    "rendementBrutPct": 0,
    "decision": "GO_AVEC_RESERVES",
    "reasons": ["TRI entre 15-20 %"],
}

LEGACY_SNAPSHOT = {
    "input": {
        "strategy": "revente",
        "prixAchat": 200000,
        "fraisNotairePct": 8,
        "budgetTravaux": 30000,
        "fraisDivers": 5000,
        "dureeMois": 12,
        "surface": 70,
        "prixReventeCible": 300000,
        "loyerMensuel": 0,
        "chargesMensuelles": 0,
        "taxeFoncieresAnnuelle": 0,
        "tmiPct": 30,
        "taxFlatPct": 30,
        "useFlatTax": True,
        "apport": 50000,
    },
    "scenarios": {
        "base": LEGACY_RESULT,
        "optimiste": LEGACY_RESULT,
        "pessimiste": LEGACY_RESULT,
    },
    "stressTests": {
        "reventeMoins5": LEGACY_RESULT,
        "travauxPlus10": LEGACY_RESULT,
    },
    "updatedAt": "2024-01-15T10:00:00.000Z",
}


class TestSnapshotMigration:
    """French-keyed snapshots from the first release."""

    def test_legacy_record_validates(self):
        snapshot = RentabiliteSnapshot.model_validate(migrate_snapshot_record(LEGACY_SNAPSHOT))
        assert snapshot.input.strategy == Strategy.RESALE
        assert snapshot.input.purchase_price == 200_000
        assert snapshot.input.personal_contribution == 50_000
        assert snapshot.scenarios.optimistic.total_cost == 251_000
        assert snapshot.stress_tests.works_plus_10.irr_pct == 19.52
        assert snapshot.scenarios.base.decision == Decision.GO_WITH_RESERVES
        assert snapshot.updated_at == "2024-01-15T10:00:00.000Z"

    def test_location_strategy(self):
        record = {**LEGACY_SNAPSHOT, "input": {**LEGACY_SNAPSHOT["input"], "strategy": "location"}}
        assert migrate_snapshot_record(record)["input"]["strategy"] == "rental"

    def test_current_record_unchanged(self, resale_snapshot):
        record = resale_snapshot.to_record()
        assert migrate_snapshot_record(record) == record

    def test_does_not_mutate_argument(self):
        original = json.loads(json.dumps(LEGACY_SNAPSHOT))
        migrate_snapshot_record(original)
        assert original == LEGACY_SNAPSHOT

    def test_store_reads_legacy_record(self, store, backend):
        backend.set(f"{DEFAULT_PREFIX}deal-1", json.dumps(LEGACY_SNAPSHOT))
        snapshot = store.read("deal-1")
        assert snapshot is not None
        assert snapshot.input.target_resale_price == 300_000


class TestDealContextMigration:
    """Older deal context layouts."""

    def test_flat_format(self):
        record = migrate_deal_context_record({"activeDealId": "d1", "title": "T3 Lyon", "stage": "offre"})
        assert record == {"activeDealId": "d1", "meta": {"title": "T3 Lyon", "stage": "offre"}}

    def test_price_renamed(self):
        record = migrate_deal_context_record({"activeDealId": "d1", "meta": {"price": 150000}})
        assert record["meta"] == {"purchasePrice": 150000}

    def test_price_does_not_override_purchase_price(self):
        record = migrate_deal_context_record({"meta": {"price": 1, "purchasePrice": 2}})
        assert record["meta"] == {"purchasePrice": 2}

    def test_current_format_unchanged(self):
        record = {"activeDealId": "d1", "meta": {"purchasePrice": 1}, "updatedAt": "x"}
        assert migrate_deal_context_record(record) == record
