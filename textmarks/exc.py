class DoesNotExist(Exception):  # noqa: N818
    """Exception raised when a resource does not exist."""

    def __init__(self, resource_type: str, resource_id: int | str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f'{resource_type} with ID "{resource_id!s}" does not exist')


class MalformedImport(Exception):  # noqa: N818
    """
    Exception raised when an import payload cannot be turned into a document.

    The in-memory document is never touched when this is raised.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to import document: {reason}")
