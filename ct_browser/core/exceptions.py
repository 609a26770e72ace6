class CtBrowserError(Exception):
    """Base exception for all ct_browser errors"""
    pass

class InvalidArgument(CtBrowserError, ValueError):
    """Caller passed an empty or otherwise unusable argument (registry entry, base URL)"""
    pass

class FetchError(CtBrowserError):
    """
    Catalog could not be retrieved:
    network failure, non-2xx status or a body that is not JSON
    """
    pass

class SchemaError(CtBrowserError):
    """Catalog body was JSON but does not have the expected shape (missing/non-list 'names')"""
    pass

class ConfigError(CtBrowserError):
    """Invalid or inconsistent global.json / dataset config"""
    pass
