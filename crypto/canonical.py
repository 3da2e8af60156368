import json
from typing import Any

def canonicalize(obj: Any) -> bytes:
    """
        Canonical JSON bytes for integrity tags.
        -sort_keys = True. fixed field order whatever order the token used
        -separators = (',', ':') removes whitespace variations
        -ensure_ascii = False keeps names like "राम" as UTF-8, not \\u escapes
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(',', ':'),
        ensure_ascii=False
    ).encode('utf-8')
