from .routes import summarize_bp

__all__ = ["summarize_bp"]
