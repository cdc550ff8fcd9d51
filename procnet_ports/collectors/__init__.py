from .auto import collect, pick_backend

__all__ = ["collect", "pick_backend"]
