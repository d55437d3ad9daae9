"""Cart-changed notifications for badges, animations and other listeners."""
import inspect
from typing import Awaitable, Callable, List, Union

from core.logging import get_logger, sanitize_id_for_logging

logger = get_logger(__name__)

CartListener = Callable[[str], Union[None, Awaitable[None]]]


class CartEvents:
    """
    Subscriber registry for the "cart changed" signal.

    Listeners get the id of the user whose cart changed and nothing else;
    they re-read the cart if they need its contents.
    """

    def __init__(self):
        self._listeners: List[CartListener] = []

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def emit(self, user_id: str) -> None:
        """Notify every listener; a failing listener does not stop the others."""
        for listener in list(self._listeners):
            try:
                result = listener(user_id)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.warning(
                    f"Cart listener failed for user {sanitize_id_for_logging(user_id)}",
                    exc_info=True,
                )
