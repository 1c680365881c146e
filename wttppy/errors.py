class WttpError(Exception):
    """Base exception for the wttppy library."""
    pass

# --- Client Errors ---

class ClientError(WttpError):
    """The request was rejected locally, before any remote call."""
    pass

class UrlParseError(ClientError): pass
class InvalidRequestError(ClientError): pass

# --- Remote Errors ---

class ResolutionError(WttpError):
    """A host alias could not be resolved to a store address."""
    pass

class CollaboratorFault(WttpError):
    """The content session raised while serving a request."""
    pass
