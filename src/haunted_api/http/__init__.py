from .executor import HttpRequestExecutor, RequestExecutor
from .templating import substitute

__all__ = ["HttpRequestExecutor", "RequestExecutor", "substitute"]
