from . import user, resume, score, payment

__all__ = ["user", "resume", "score", "payment"]
