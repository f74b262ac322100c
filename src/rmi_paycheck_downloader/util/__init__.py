from .banner import asciify

__all__ = ["asciify"]
