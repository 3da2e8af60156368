import logging

from flask import Flask, request, jsonify

from issuer.issue import CredentialIssuer
from passes import codec
from passes.config import config
from passes.errors import IssuanceError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("userId", "name", "role", "timeslot", "gate", "purpose")

def create_app(issuer: CredentialIssuer) -> Flask:
    app = Flask(__name__)

    @app.post('/issue')
    def issue():
        """
        Request JSON:
        {
            "userId": "...", "name": "...", "role": "pilgrim",
            "timeslot": "14:00-16:00", "gate": "main", "purpose": "darshan",
            "validUntil": epoch ms (optional),
            "validHours": number (optional, default from config)
        }
        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Request body must be a JSON object"}), 400

        missing = [f for f in REQUIRED_FIELDS if f not in data]
        if missing:
            return jsonify({"error": f"Missing required fields: {missing}"}), 400

        fields = [data[f] for f in REQUIRED_FIELDS]
        try:
            if "validUntil" in data:
                record = issuer.issue(*fields, valid_until=data["validUntil"])
            else:
                hours = data.get("validHours")
                if hours is not None and (isinstance(hours, bool) or not isinstance(hours, (int, float))):
                    return jsonify({"error": "validHours must be a number"}), 400
                record = issuer.issue_for_hours(*fields, hours=hours)
        except IssuanceError as e:
            logger.warning("Issuance refused: %s", e)
            return jsonify({"error": str(e)}), 400

        return jsonify({
            "pass": record.model_dump(mode="json", by_alias=True),
            "token": codec.encode(record),
        }), 200

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    return app

if __name__ == '__main__':
    logging.basicConfig(level=config.LOG_LEVEL)
    app = create_app(CredentialIssuer.from_config(config))
    app.run(host=config.ISSUER_HOST, port=config.ISSUER_PORT, debug=config.API_DEBUG)
