from oktasdk.dispatcher import command


@command
def get_error_context():
    """Return error context schema for a component.

    Schema maps context variable names to attribute paths relative to the
    component, which is available as `this`.
    """


@command
def to_map_value():
    """Convert a resource property value to its request body representation.

    Signature: to_map_value(converter, value, name, dirty_only)
    """


@get_error_context.register(object)
def _get_error_context(this: object) -> dict:
    return {}
