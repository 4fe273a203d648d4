from __future__ import annotations

from datetime import date

import pendulum
import pytest

from crewscreening.core.stability import (
    ContractPatternAnalyzer,
    RankProgressionAnalyzer,
    StabilityConfig,
    StabilityIndexCalculator,
)
from crewscreening.core.stability.contract_pattern import FLAG_OVERLAP, FLAG_SHORT_PATTERN
from crewscreening.core.stability.rank_progression import (
    FLAG_RANK_ANOMALY,
    FLAG_UNREALISTIC_PROMOTION,
)
from crewscreening.core.stability.ranks import rank_level
from crewscreening.schemas import CandidateContract

NOW = pendulum.datetime(2025, 1, 1, tz="UTC")


def build_contract(contract_id: str, start: str, end: str | None, **kwargs) -> CandidateContract:
    return CandidateContract(
        contract_id=contract_id,
        candidate_id=kwargs.pop("candidate_id", "C-1"),
        start_date=date.fromisoformat(start),
        end_date=date.fromisoformat(end) if end else None,
        company_name=kwargs.pop("company_name", "Acme Shipping"),
        **kwargs,
    )


def short_history() -> list[CandidateContract]:
    # 122, 152 and 137 days: 4.0, 5.0 and 4.5 months
    return [
        build_contract("K-1", "2021-01-01", "2021-05-03"),
        build_contract("K-2", "2021-07-01", "2021-11-30"),
        build_contract("K-3", "2022-02-01", "2022-06-18"),
    ]


def test_short_same_company_history():
    result = ContractPatternAnalyzer(now_provider=lambda: NOW).analyze(short_history(), StabilityConfig())

    assert result["total_contracts"] == 3
    assert result["short_contract_ratio"] == 1.0
    assert result["avg_duration_months"] == pytest.approx(4.5)
    assert result["unique_companies"] == 1
    assert result["company_repeat_ratio"] == 1.0
    assert [gap["months"] for gap in result["gap_periods"]] == [1.9, 2.1]
    assert result["total_gap_months"] == pytest.approx(4.0)
    assert result["overlap_count"] == 0
    assert result["recent_unique_companies_3y"] == 1
    assert result["flags"] == [FLAG_SHORT_PATTERN]


def test_rank_specific_short_threshold():
    cfg = StabilityConfig({"short_contract_months_by_rank": {"AB": 4}})
    contracts = [
        build_contract("K-1", "2021-01-01", "2021-05-03", rank_code="Able Seaman"),
        build_contract("K-2", "2021-07-01", "2021-11-30", rank_code="AB"),
    ]

    result = ContractPatternAnalyzer(now_provider=lambda: NOW).analyze(contracts, cfg)

    assert result["short_contract_count"] == 0


def test_overlapping_contracts_are_reported():
    contracts = [
        build_contract("K-1", "2020-01-01", "2020-07-01"),
        build_contract("K-2", "2020-06-01", "2020-12-01", company_name="Other Lines"),
    ]

    result = ContractPatternAnalyzer(now_provider=lambda: NOW).analyze(contracts)

    assert result["overlaps"] == [
        {"contract_a_id": "K-1", "contract_b_id": "K-2", "overlap_days": 30}
    ]
    assert FLAG_OVERLAP in result["flags"]
    assert result["gap_periods"] == []


def test_empty_history_is_neutral():
    result = ContractPatternAnalyzer().analyze([])
    assert result["total_contracts"] == 0
    assert result["flags"] == []


def test_stability_index_uses_sample_deviation():
    result = StabilityIndexCalculator(now_provider=lambda: NOW).calculate(short_history())

    assert result["avg_duration_months"] == pytest.approx(4.5)
    assert result["std_duration_months"] == pytest.approx(0.5)
    assert result["stability_index"] == pytest.approx(9.0)
    assert result["contract_count"] == 3


def test_uniform_durations_hit_the_cap():
    contracts = [
        build_contract("K-1", "2021-01-01", "2021-07-01"),
        build_contract("K-2", "2022-01-01", "2022-07-01"),
        build_contract("K-3", "2023-01-01", "2023-07-01"),
    ]

    result = StabilityIndexCalculator(now_provider=lambda: NOW).calculate(contracts)

    assert result["stability_index"] == 10.0
    assert result["std_duration_months"] == 0.0


def test_stability_index_needs_two_completed_contracts():
    calculator = StabilityIndexCalculator(now_provider=lambda: NOW)
    contracts = [
        build_contract("K-1", "2023-01-01", "2023-07-01"),
        build_contract("K-2", "2024-01-01", None),
    ]

    result = calculator.calculate(contracts)

    assert result["stability_index"] is None
    assert result["contract_count"] == 1
    assert result["avg_duration_months"] > 0
    assert calculator.calculate([])["avg_duration_months"] == 0.0


def test_rank_downgrade_is_flagged():
    contracts = [
        build_contract("K-1", "2018-01-01", "2018-09-01", rank_code="Chief Officer"),
        build_contract("K-2", "2020-01-01", "2020-09-01", rank_code="2/O"),
    ]

    result = RankProgressionAnalyzer().analyze(contracts)

    assert result["department"] == "deck"
    [anomaly] = result["anomalies"]
    assert anomaly["type"] == "rank_downgrade"
    assert (anomaly["from_rank"], anomaly["to_rank"]) == ("C/O", "2/O")
    assert result["flags"] == [FLAG_RANK_ANOMALY]


def test_fast_multi_level_promotion_is_flagged():
    contracts = [
        build_contract("K-1", "2020-01-01", "2020-03-15", rank_code="OS"),
        build_contract("K-2", "2020-04-01", "2020-10-01", rank_code="Bosun"),
    ]

    result = RankProgressionAnalyzer().analyze(contracts)

    [anomaly] = result["anomalies"]
    assert anomaly["type"] == "unrealistic_promotion"
    assert anomaly["months_between"] == 3
    assert result["flags"] == [FLAG_UNREALISTIC_PROMOTION]


def test_steady_progression_and_unknown_ranks():
    contracts = [
        build_contract("K-1", "2018-01-01", "2018-09-01", rank_code="AB"),
        build_contract("K-2", "2020-01-01", "2020-09-01", rank_code="Purser"),
        build_contract("K-3", "2021-01-01", "2021-09-01", rank_code="BSN"),
    ]

    result = RankProgressionAnalyzer().analyze(contracts)

    assert result["anomalies"] == []
    assert result["flags"] == []
    assert result["unknown_ranks"] == [{"rank": "Purser", "contract_id": "K-2"}]
    assert [step["canonical"] for step in result["progression"]] == ["AB", "BSN"]
    assert [step["level"] for step in result["progression"]] == [3, 4]


def test_rank_level_follows_department_ladder():
    assert rank_level("C/E") == 8
    assert rank_level("ETO") == 1
    assert rank_level("PURSER") is None
