class ChroniclesError(Exception):
    pass


class NotFoundError(ChroniclesError, LookupError):
    def __init__(self, kind: str, identifier) -> None:
        super().__init__(f"{kind} not found: {identifier}")
        self.kind = kind
        self.identifier = identifier


class InvalidActionError(ChroniclesError, ValueError):
    def __init__(self, action) -> None:
        super().__init__(f"Unknown action: {action}")
        self.action = action
