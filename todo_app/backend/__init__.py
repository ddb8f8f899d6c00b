from ..core.config import Settings
from .base import AuthClient, AuthSession, Backend, TodoTable


async def build_backend(settings: Settings) -> Backend:
    """Construct the configured backend. Called once from the app lifespan."""
    if settings.BACKEND == "local":
        from .local import build_local_backend

        return build_local_backend(settings)
    if settings.BACKEND == "supabase":
        from .hosted import build_hosted_backend

        return await build_hosted_backend(settings)
    raise ValueError(f"Unknown BACKEND {settings.BACKEND!r}; expected 'supabase' or 'local'")


__all__ = ["AuthClient", "AuthSession", "Backend", "TodoTable", "build_backend"]
