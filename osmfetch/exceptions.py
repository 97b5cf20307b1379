"""
Exceptions raised by the fetch pipeline

Network and XML errors are not wrapped: requests and ElementTree
exceptions reach the caller as raised.
"""


class OSMFetchError(Exception):
    """Base class for osmfetch errors"""


class ElementDecodeError(OSMFetchError):
    """An XML element could not be turned into a record"""
    
    def __init__(self, element_type: str, message: str):
        self.element_type = element_type
        super().__init__(f"Cannot decode <{element_type}>: {message}")


class ElementNotFoundError(OSMFetchError):
    """A response did not contain the requested element"""
    
    def __init__(self, element_type: str, element_id: int):
        self.element_type = element_type
        self.element_id = element_id
        super().__init__(f"No {element_type} {element_id} in API response")
