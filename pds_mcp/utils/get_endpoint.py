from typing import Any, Dict, Mapping
from urllib.parse import quote


def get_endpoint(base_url: str, path: str, path_values: Mapping[str, Any] | None = None) -> str:
    """Join `base_url` and a path template, substituting URL-encoded path values.

    `path` may embed `{name}` placeholders; every placeholder must have a value.
    """
    base_url = (base_url or "").rstrip("/")
    if not base_url:
        raise ValueError("base_url must be set")

    encoded: Dict[str, str] = {k: quote(str(v), safe="") for k, v in (path_values or {}).items()}
    try:
        resolved = path.format(**encoded)
    except KeyError as e:
        raise ValueError(f"Missing path value {e} for '{path}'") from None

    if not resolved.startswith("/"):
        resolved = "/" + resolved
    return f"{base_url}{resolved}"
