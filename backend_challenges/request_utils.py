def parse_id(value, field: str) -> int:
    """Parse an integer id from a JSON body or query string value.

    Raises ValueError with a client-facing message when missing or invalid.
    """
    if value is None or value == "":
        raise ValueError(f"Missing field: {field}")
    if isinstance(value, bool):
        raise ValueError(f"Invalid {field}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid {field}")
