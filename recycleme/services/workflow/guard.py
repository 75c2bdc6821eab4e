class SubmissionGuard:
    """
    Single-flight flag for lookups.

    Everything runs on one asyncio loop, so a plain boolean is enough:
    there is no await between checking and setting it.
    """

    def __init__(self):
        self._held = False

    @property
    def held(self) -> bool:
        return self._held

    def try_acquire(self) -> bool:
        if self._held:
            return False
        self._held = True
        return True

    def release(self):
        self._held = False
