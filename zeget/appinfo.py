"""Application identity."""

APPLICATION_NAME = "zeget"
APPLICATION_REPOSITORY = "permafrost-dev/" + APPLICATION_NAME
VERSION = "2.0.0-rc"


def get_application_name() -> str:
    """Return the application's name."""
    return APPLICATION_NAME