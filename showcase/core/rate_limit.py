from time import time


#Sliding-window request counter; one instance lives on each application
class RateLimiter:

    def __init__(self):
        self._store: dict[str, tuple[int, list[float]]] = {}

    def __len__(self) -> int:
        return len(self._store)

    #Forget keys whose newest request has left its window
    def _evict_expired(self, now: float):
        expired = [
            key
            for key, (window, timestamps) in self._store.items()
            if not timestamps or now - timestamps[-1] >= window
        ]
        for key in expired:
            del self._store[key]

    def hit(self, key: str, max_requests: int, window_seconds: int) -> bool:
        now = time()
        self._evict_expired(now)

        _, previous = self._store.get(key, (window_seconds, []))
        timestamps = [t for t in previous if now - t < window_seconds]

        if len(timestamps) >= max_requests:
            self._store[key] = (window_seconds, timestamps)
            return False

        timestamps.append(now)
        self._store[key] = (window_seconds, timestamps)
        return True


def make_key(request, endpoint: str, subject: str = "") -> str:
    ip = request.client.host if request.client else "unknown"
    return f"{endpoint}:{ip}:{subject}"


#(max requests, window seconds) per rate-limited endpoint
RATE_LIMITS = {
    "admin_login": (5, 60),
}
