"""Request throttle: a fixed blocking pause after every catalog request.

MusicBrainz allows roughly one request per second per client and answers
faster callers with 503s. A token bucket would still allow bursts, so the
throttle simply sleeps for ``delay`` seconds after each request, success or
failure. Requests are therefore serialized in wall-clock time.

Example::

    throttle = RequestThrottle(delay=1.0)
    result = client.lookup(artist_id)
    throttle.pause()

The sleep function is injectable so tests can count pauses without
actually waiting.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass
class RequestThrottle:
    """Blocking minimum delay between remote requests.

    Attributes:
        delay: Seconds to sleep after each request
        sleep: Sleep function (``time.sleep`` outside tests)
        pauses: Number of pauses taken so far
    """

    delay: float = 1.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)
    pauses: int = field(default=0, init=False)

    def pause(self) -> None:
        """Block for the configured delay."""
        self.pauses += 1
        if self.delay > 0:
            self.sleep(self.delay)
