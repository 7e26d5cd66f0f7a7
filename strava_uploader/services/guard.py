import logging
from secrets import compare_digest

from ..errors import Locked, WrongPin

logger = logging.getLogger(__name__)

def verify_pin(pin, address, secret, store, max_attempts=3, lockout_seconds=3 * 60 * 60):
    """
    Check ``pin`` for the client at ``address``.

    Returns ``{'allowed': True}`` on a match. Raises ``WrongPin`` with the
    remaining tries, or ``Locked`` once ``max_attempts`` wrong PINs in a row
    were seen. While locked every attempt is rejected, correct PIN or not.
    """
    with store.lock:
        rec = store.record(address)
        now = store.now()

        if rec['blocked_until'] is not None:
            if now < rec['blocked_until']:
                logger.warning(f"PIN attempt from locked address {address}")
                raise Locked("Too many wrong attempts. Try again later.")
            # Lockout served, start over with a full budget
            rec['blocked_until'] = None
            rec['count'] = 0

        if isinstance(pin, str) and compare_digest(pin.encode(), str(secret).encode()):
            rec['count'] = 0
            return {'allowed': True}

        rec['count'] += 1
        if rec['count'] >= max_attempts:
            rec['blocked_until'] = now + lockout_seconds
            logger.warning(f"Locking out {address} for {lockout_seconds} seconds")
            raise Locked(f"Locked out for {_duration(lockout_seconds)}.")

        raise WrongPin(max_attempts - rec['count'])


def _duration(seconds):
    for unit, size in (("hour", 3600), ("minute", 60)):
        if seconds >= size and seconds % size == 0:
            n = seconds // size
            return f"{n} {unit}" + ("" if n == 1 else "s")
    return f"{seconds} seconds"
