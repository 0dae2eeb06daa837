"""Domain-specific exceptions."""


class SuggestError(Exception):
    pass


class CacheError(SuggestError):
    pass


class ConfigurationError(SuggestError):
    pass
