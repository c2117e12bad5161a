"""Expected outcomes for worker name parsing and a harness to check them.

The predefined table mirrors the cases the pool has always been tested
against, including the known oddities:
- a trailing ``@`` yields an empty (not absent) domain;
- an ``@`` after the first ``.`` switches to the lightning form even when the
  author meant a plain worker suffix;
- extra ``@`` characters stay inside the domain.

More cases can be supplied as YAML or JSON files holding a list of mappings
with ``workername`` and the expected fields. Missing fields mean absent.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from workername.parser import ParsedWorkerName, parse_workername
from workername.report import mismatched_fields


@dataclass(frozen=True)
class Scenario:
    workername: str
    expected: ParsedWorkerName

    @staticmethod
    def from_mapping(payload: dict[str, Any]) -> Scenario:
        if "workername" not in payload:
            raise ValueError(f"Scenario is missing 'workername': {payload!r}")
        workername = str(payload["workername"])
        values = {
            f.name: None if payload.get(f.name) is None else str(payload[f.name])
            for f in fields(ParsedWorkerName)
        }
        if values["primary_id"] is None:
            raise ValueError(f"Scenario {workername!r} is missing 'primary_id'")
        return Scenario(workername=workername, expected=ParsedWorkerName(**values))


@dataclass
class ScenarioFailure:
    workername: str
    field: str
    expected: str | None
    found: str | None


@dataclass
class CheckSummary:
    total: int
    passed: int
    failures: list[ScenarioFailure]

    @property
    def ok(self) -> bool:
        return not self.failures


PREDEFINED_SCENARIOS: list[Scenario] = [
    Scenario("user1", ParsedWorkerName("user1")),
    Scenario("user1.worker1", ParsedWorkerName("user1", suffix="worker1")),
    Scenario(
        "btcaddress.lightning@domain.worker1",
        ParsedWorkerName("btcaddress", "lightning", "domain", "worker1"),
    ),
    Scenario("btcaddress.lightning@domain", ParsedWorkerName("btcaddress", "lightning", "domain")),
    Scenario("btcaddress.lightning@", ParsedWorkerName("btcaddress", "lightning", "")),
    Scenario("user1.worker1.rig2", ParsedWorkerName("user1", suffix="worker1.rig2")),
    Scenario("user1.worker@rig2", ParsedWorkerName("user1", "worker", "rig2")),
    Scenario(
        "1abc123def.lnid@example.com.worker1",
        ParsedWorkerName("1abc123def", "lnid", "example", "com.worker1"),
    ),
    Scenario(
        "btc.lightning@domain@extra.worker",
        ParsedWorkerName("btc", "lightning", "domain@extra", "worker"),
    ),
    Scenario(
        "bc1address.lightning@domain.worker.rig1.gpu2",
        ParsedWorkerName("bc1address", "lightning", "domain", "worker.rig1.gpu2"),
    ),
]


def load_scenarios(path: Path) -> list[Scenario]:
    if path.suffix.lower() in {".yml", ".yaml"}:
        try:
            payload = yaml.safe_load(path.read_text())
        except yaml.YAMLError as exc:
            raise ValueError(f"Scenario file is not valid YAML: {path}: {exc}") from exc
    else:
        payload = json.loads(path.read_text())
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ValueError(f"Scenario file must hold a list of cases: {path}")
    for entry in payload:
        if not isinstance(entry, dict):
            raise ValueError(f"Scenario must be a mapping, got {entry!r}: {path}")
    return [Scenario.from_mapping(entry) for entry in payload]


def check_scenarios(scenarios: Iterable[Scenario]) -> CheckSummary:
    """Parse every scenario and collect one failure per mismatched field."""
    total = 0
    passed = 0
    failures: list[ScenarioFailure] = []
    for scenario in scenarios:
        total += 1
        result = parse_workername(scenario.workername)
        bad = mismatched_fields(result, scenario.expected)
        if not bad:
            passed += 1
            continue
        for name in bad:
            failures.append(
                ScenarioFailure(
                    workername=scenario.workername,
                    field=name,
                    expected=getattr(scenario.expected, name),
                    found=getattr(result, name),
                )
            )
    return CheckSummary(total=total, passed=passed, failures=failures)
