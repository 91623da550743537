class DummyLogger:
    def __init__(self):
        self.messages = []

    async def info(self, *args, **kwargs):
        self.messages.append(("info", args))

    async def warning(self, *args, **kwargs):
        self.messages.append(("warning", args))

    async def error(self, *args, **kwargs):
        self.messages.append(("error", args))


class DummyContext:
    """Mock context object for testing"""

    def __init__(self, **meta):
        import uuid
        self.log = DummyLogger()
        self._meta = meta
        # Give each context a unique session_id to avoid state leakage between tests
        self.session_id = str(uuid.uuid4())
        self._state = {}

    def get_state(self, key, default=None):
        return self._state.get(key, default)

    def set_state(self, key, value):
        self._state[key] = value

    async def info(self, message):
        await self.log.info(message)

    async def warning(self, message):
        await self.log.warning(message)

    async def error(self, message):
        await self.log.error(message)
