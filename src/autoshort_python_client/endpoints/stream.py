from typing import Callable, Optional
from websockets.exceptions import ConnectionClosedError, WebSocketException
from websockets.sync.client import connect
from ..base_client import get_logger


class StreamListener:
    """
    Best-effort WebSocket listener.

    Opens one long-lived connection and hands every inbound text frame to a
    callback (by default, the logger). There is no buffering, replay or
    reconnect: a failed connection or a close simply ends `listen()`.

    Attributes
    ----------
    open_timeout : float
        Seconds allowed for the opening handshake.
    """

    def __init__(
        self,
        *,
        open_timeout: Optional[float] = 30,
        verbose: bool = False,
    ) -> None:
        self.open_timeout = open_timeout
        self.logger = get_logger("autoshort.stream", verbose)
        self._ws = None

    def _default_message_handler(self, payload: str) -> None:
        """Default handler used when no callback is passed."""
        self.logger.info(f"Stream message: {payload}")

    def listen(
        self,
        endpoint: str,
        on_message: Optional[Callable[[str], None]] = None,
    ) -> None:
        """
        Connect to ``endpoint`` and dispatch frames until the socket closes.

        Parameters
        ----------
        endpoint : str
            WebSocket URL (``ws://`` or ``wss://``).
        on_message : callable, optional
            Invoked with the payload of each text frame.

        Notes
        -----
        - This method blocks until the server closes the connection or
          `stop()` is called from another thread.
        - Connection failures are logged, not raised.
        """
        if not endpoint:
            raise ValueError("A valid stream endpoint must be provided.")

        handler = on_message or self._default_message_handler

        self.logger.info(f"Connecting to stream: {endpoint}")
        try:
            ws = connect(endpoint, open_timeout=self.open_timeout)
        except (OSError, WebSocketException) as e:
            self.logger.error(f"Unable to connect to {endpoint}: {e}")
            return

        self._ws = ws
        try:
            with ws:
                self.logger.info(f"Connected to stream: {endpoint}")
                for message in ws:
                    if isinstance(message, bytes):
                        self.logger.debug(
                            f"Ignoring binary frame ({len(message)} bytes)"
                        )
                        continue
                    try:
                        handler(message)
                    except Exception as e:
                        self.logger.error(f"Stream handler failed: {e}")
        except ConnectionClosedError as e:
            self.logger.warning(f"Stream {endpoint} closed abnormally: {e}")
            return
        finally:
            self._ws = None

        self.logger.info(f"Stream {endpoint} closed.")

    def stop(self) -> None:
        """Close the active connection, if any."""
        ws = self._ws
        if ws is not None:
            ws.close()
