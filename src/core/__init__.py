from src.core.context import CoreContext

__all__ = ["CoreContext"]
