import os


def from_env(name: str) -> str:
    """
    Get an environment variable, or fail loudly if it is not set.

    An empty value is a value: only the absence of the variable is an error.
    """
    try:
        return os.environ[name]
    except KeyError:
        raise LookupError(f"Environment variable {name} is not set") from None
