def redact_secret(secret: str | None, visible_chars: int = 4) -> str:
    """
    Redact a secret (API key, user id) for logging purposes.
    Shows the first few characters followed by ***.
    """
    if not secret:
        return "None"
    if len(secret) <= visible_chars:
        return "***"
    return f"{secret[:visible_chars]}***"
