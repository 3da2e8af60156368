import argparse
import logging
import os
from pathlib import Path

from crypto.signing import HmacTagScheme
from experiments.metrics import size_bytes, timed, write_csv
from experiments.scenarios import SCENARIOS, build_token
from gate.ledger import ScanLedger
from gate.scanner import GateScanner
from gate.storage import MemoryStore
from gate.verify import CredentialVerifier
from issuer.issue import HOUR_MS, CredentialIssuer
from passes.model import now_ms

logger = logging.getLogger(__name__)

OUT = Path("experiments/results")

def run(n=10, out_path=OUT / "gate_scenarios.csv"):
    scheme = HmacTagScheme(os.urandom(32))
    issuer = CredentialIssuer(scheme)
    # issues passes as of three hours ago, so a 2h pass is already expired now
    expired_issuer = CredentialIssuer(scheme, clock=lambda: now_ms() - 3 * HOUR_MS)
    scanner = GateScanner(CredentialVerifier(scheme), ScanLedger(MemoryStore()))

    rows = []
    for scenario, setup in SCENARIOS.items():
        for i in range(n):
            token = build_token(issuer, expired_issuer, scenario)
            report, verify_ms = timed(lambda: scanner.scan(token))
            result = report.result
            rows.append({
                "scenario": scenario,
                "run_idx": i + 1,
                "valid": result.valid,
                "error_kind": result.error_kind.value if result.error_kind else "",
                "as_expected": (result.error_kind.value if result.error_kind else None) == setup["expect"],
                "verify_ms": round(verify_ms, 3),
                "token_bytes": size_bytes(token),
            })

    write_csv(rows, out_path)
    logger.info("Wrote %d rows to %s", len(rows), out_path)
    return rows

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    p = argparse.ArgumentParser()
    p.add_argument("--n", type=int, default=20)
    args = p.parse_args()
    rows = run(n=args.n)
    bad = [r for r in rows if not r["as_expected"]]
    print("Rows:", len(rows), "unexpected:", len(bad))
