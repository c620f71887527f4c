from .markets import MarketsAPI
from .stream import StreamListener

__all__ = ["MarketsAPI", "StreamListener"]
