class TransportError(Exception):
    """Transport could not be created, bound or used."""
