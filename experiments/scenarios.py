import json

from passes import codec

def _valid(token):
    return token

def _tampered(token):
    data = json.loads(token)
    data["name"] = data["name"][:-1] + ("X" if data["name"][-1] != "X" else "Y")
    return json.dumps(data)

def _missing_signature(token):
    data = json.loads(token)
    del data["signature"]
    return json.dumps(data)

def _malformed(token):
    return "not json"

SCENARIOS = {
    "valid": {"mutate": _valid, "expired": False, "expect": None},
    "tampered": {"mutate": _tampered, "expired": False, "expect": "SignatureError"},
    "expired": {"mutate": _valid, "expired": True, "expect": "ExpiredError"},
    "malformed": {"mutate": _malformed, "expired": False, "expect": "DecodeError"},
    "missing_signature": {"mutate": _missing_signature, "expired": False, "expect": "DecodeError"},
}

def build_token(issuer, expired_issuer, scenario):
    setup = SCENARIOS[scenario]
    source = expired_issuer if setup["expired"] else issuer
    record = source.issue_for_hours(
        subject_id="user123",
        subject_name="Ram Sharma",
        role="pilgrim",
        timeslot="14:00-16:00",
        gate="main",
        purpose="darshan",
        hours=2,
    )
    return setup["mutate"](codec.encode(record))
