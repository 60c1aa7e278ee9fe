def canonical_wallet(address: str) -> str:
    """Lowercase, whitespace-trimmed form used for every wallet comparison and storage key."""
    return address.strip().lower()
