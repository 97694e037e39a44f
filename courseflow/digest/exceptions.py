class DigestError(Exception):
    """Raised when a candidate's content cannot be fingerprinted."""
