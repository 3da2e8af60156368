import logging

from flask import Flask, request, jsonify

from gate.ledger import ScanLedger
from gate.scanner import GateScanner
from gate.verify import CredentialVerifier
from passes.config import config
from passes.errors import ScannerStateError

logger = logging.getLogger(__name__)

def _pass_json(record):
    return record.model_dump(mode="json", by_alias=True) if record is not None else None

def create_app(scanner: GateScanner) -> Flask:
    app = Flask(__name__)

    @app.post("/verify")
    def verify():
        """Manual-entry verification: {"token": "<pass token text>"}."""
        data = request.get_json(silent=True)
        token = data.get("token") if isinstance(data, dict) else None
        if not isinstance(token, str):
            return jsonify({"error": "token (string) required"}), 400

        try:
            report = scanner.manual_entry(token)
        except ScannerStateError as e:
            return jsonify({"error": str(e)}), 409

        result = report.result
        return jsonify({
            "valid": result.valid,
            "errorKind": result.error_kind.value if result.error_kind else None,
            "message": result.message,
            "pass": _pass_json(result.pass_record),
            "scanId": report.record.id,
            "persisted": report.persisted,
            "warning": report.warning,
        }), 200

    @app.get("/scans")
    def scans():
        return jsonify({
            "scans": [r.model_dump(mode="json", by_alias=True) for r in scanner.ledger.history()]
        })

    @app.get("/scans/counts")
    def scan_counts():
        return jsonify(scanner.ledger.counts().as_dict())

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    return app

def build_scanner(cfg) -> GateScanner:
    from crypto.keys import load_tag_scheme
    verifier = CredentialVerifier(load_tag_scheme(cfg, for_issuing=False))
    return GateScanner(verifier, ScanLedger.from_config(cfg))

if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL)
    app = create_app(build_scanner(config))
    app.run(host=config.GATE_HOST, port=config.GATE_PORT, debug=config.API_DEBUG)
