"""Migration of persisted records written by earlier releases.

The first release stored snapshots with French keys (prixAchat, optimiste,
reventeMoins5, GO_AVEC_RESERVES...) and the deal context as a flat record.
Readers call these functions on the raw JSON before validation; current
records pass through unchanged.
"""

from __future__ import annotations

from typing import Any

LEGACY_INPUT_KEYS = {
    "prixAchat": "purchasePrice",
    "fraisNotairePct": "notaryFeeRatePct",
    "budgetTravaux": "worksBudget",
    "fraisDivers": "miscFees",
    "dureeMois": "durationMonths",
    "prixReventeCible": "targetResalePrice",
    "loyerMensuel": "monthlyRent",
    "chargesMensuelles": "monthlyCharges",
    "taxeFoncieresAnnuelle": "annualPropertyTax",
    "tmiPct": "marginalTaxRatePct",
    "taxFlatPct": "flatTaxRatePct",
    "apport": "personalContribution",
}

LEGACY_RESULT_KEYS = {
    "fraisNotaire": "notaryFee",
    "coutTotal": "totalCost",
    "margeBrute": "grossMargin",
    "margePct": "marginPct",
    "triPct": "irrPct",
    "cashflowMensuel": "monthlyCashflow",
    "rendementBrutPct": "grossYieldPct",
}

LEGACY_STRATEGIES = {"revente": "resale", "location": "rental"}
LEGACY_DECISIONS = {"GO_AVEC_RESERVES": "GO_WITH_RESERVES"}
LEGACY_SCENARIOS = {"optimiste": "optimistic", "pessimiste": "pessimistic"}
LEGACY_STRESS_TESTS = {"reventeMoins5": "resaleMinus5", "travauxPlus10": "worksPlus10"}


def _rename(data: dict[str, Any], mapping: dict[str, str]) -> dict[str, Any]:
    return {mapping.get(k, k): v for k, v in data.items()}


def _migrate_result(result: Any) -> Any:
    if not isinstance(result, dict):
        return result
    migrated = _rename(result, LEGACY_RESULT_KEYS)
    if isinstance(migrated.get("decision"), str) and migrated["decision"] in LEGACY_DECISIONS:
        migrated["decision"] = LEGACY_DECISIONS[migrated["decision"]]
    return migrated


def migrate_snapshot_record(raw: dict[str, Any]) -> dict[str, Any]:
    """Bring a persisted profitability snapshot to the current layout.

    Args:
        raw: Decoded JSON record

    Returns:
        A new dict using current keys and enum values
    """
    record = dict(raw)

    data = record.get("input")
    if isinstance(data, dict):
        data = _rename(data, LEGACY_INPUT_KEYS)
        if isinstance(data.get("strategy"), str) and data["strategy"] in LEGACY_STRATEGIES:
            data["strategy"] = LEGACY_STRATEGIES[data["strategy"]]
        record["input"] = data

    scenarios = record.get("scenarios")
    if isinstance(scenarios, dict):
        record["scenarios"] = {
            LEGACY_SCENARIOS.get(k, k): _migrate_result(v) for k, v in scenarios.items()
        }

    stress_tests = record.get("stressTests")
    if isinstance(stress_tests, dict):
        record["stressTests"] = {
            LEGACY_STRESS_TESTS.get(k, k): _migrate_result(v) for k, v in stress_tests.items()
        }

    return record


def migrate_deal_context_record(raw: dict[str, Any]) -> dict[str, Any]:
    """Bring a persisted deal context to the current layout.

    Handles the flat format {activeDealId, title, stage, updatedAt} and the
    former meta.price key, renamed meta.purchasePrice.
    """
    record = dict(raw)

    if "title" in record and "meta" not in record:
        record["meta"] = {"title": record.pop("title"), "stage": record.pop("stage", None)}

    meta = record.get("meta")
    if isinstance(meta, dict) and "price" in meta:
        meta = dict(meta)
        price = meta.pop("price")
        meta.setdefault("purchasePrice", price)
        record["meta"] = meta

    return record
