import logging
from typing import Callable

logger = logging.getLogger(__name__)


class BackgroundTaskScheduler:
    """Run one-shot delayed callbacks as Socket.IO background tasks.

    - Works under whatever async mode the Socket.IO server picked
      (threading, eventlet, gevent) by sleeping through ``socketio.sleep``
    - Optionally logs a heartbeat every ``heartbeat_sec`` while waiting
    - There is no cancellation: callbacks re-check state when they fire
    """

    def __init__(self, socketio, heartbeat_sec: int = 0):
        self.socketio = socketio
        self.heartbeat_sec = heartbeat_sec

    def schedule(self, delay: float, callback: Callable[[], None], label: str = '') -> None:
        logger.info(f"[timer-set] {label} delay={delay}s")
        self.socketio.start_background_task(self._worker, delay, callback, label)

    def _worker(self, delay: float, callback: Callable[[], None], label: str) -> None:
        hb = self.heartbeat_sec
        if hb and hb > 0:
            slept = 0
            while slept < delay:
                step = min(hb, delay - slept)
                self.socketio.sleep(step)
                slept += step
                logger.info(f"[timer-heartbeat] {label} remaining={max(0, delay - slept)}s")
        else:
            self.socketio.sleep(delay)
        logger.info(f"[timer-fire] {label}")
        try:
            callback()
        except Exception:
            # Logged here; nothing upstream awaits the task
            logger.exception(f"[timer-error] {label}")
