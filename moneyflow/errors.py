class MoneyflowError(Exception):
    pass


class InvalidInputError(MoneyflowError, ValueError):
    """Structurally invalid argument handed to the engine."""


class InvalidDateRangeError(InvalidInputError):
    def __init__(self, start, end):
        super().__init__(f"Invalid date range: start {start} is after end {end}")
        self.start = start
        self.end = end


class UnknownPeriodError(InvalidInputError):
    def __init__(self, period):
        super().__init__(f"Unknown period: {period!r}")
        self.period = period


class InvalidBudgetError(InvalidInputError):
    pass


class RecordNotFoundError(MoneyflowError, LookupError):
    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} with ID {record_id} does not exist")
        self.kind = kind
        self.record_id = record_id


class InvalidSeedError(InvalidInputError):
    def __init__(self, kind: str, record_id: str, error: dict):
        super().__init__(f"Invalid {kind} {record_id} in seed: {error['message']}")
        self.kind = kind
        self.record_id = record_id
        self.error = error
