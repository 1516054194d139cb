from . import user, resume, payment

__all__ = ["user", "resume", "payment"]
