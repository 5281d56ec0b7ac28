"""Exceptions raised while painting node layers or consuming load events."""


class OverlayError(Exception):
    """Base class for grid overlay errors."""


class MissingAnnotationError(OverlayError):
    """A node lacks an annotation the layer needs to draw it."""

    def __init__(self, node_id, key: str):
        self.node_id = node_id
        self.key = key
        super().__init__(f"Node {node_id!r} has no '{key}' annotation")


class MalformedEventError(OverlayError):
    """A load event is missing attributes or carries the wrong types."""

    def __init__(self, event_type: str, reason: str):
        self.event_type = event_type
        self.reason = reason
        super().__init__(f"Malformed event '{event_type}': {reason}")


class UnprojectableLocationError(MissingAnnotationError):
    """A node's location annotation has no pixel position in the viewport."""

    def __init__(self, node_id, key: str, reason: str):
        self.node_id = node_id
        self.key = key
        self.reason = reason
        OverlayError.__init__(self, f"Node {node_id!r} '{key}' cannot be projected: {reason}")
