from .revision import RevisionDecisionItem, RevisionMatchRead

__all__ = [
    "RevisionDecisionItem",
    "RevisionMatchRead",
]
