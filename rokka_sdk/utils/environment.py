from typing import Union

TRUTHY_VALUES = {"true", "1", "yes", "on"}
FALSY_VALUES = {"false", "0", "no", "off"}


def str2bool(value: Union[str, bool]) -> bool:
    """Interpret an environment flag as a boolean.

    Args:
        value (Union[str, bool]): Raw value. Strings are matched case-insensitively
            against `true/1/yes/on` and `false/0/no/off`.

    Returns:
        bool: The interpreted flag.

    Raises:
        ValueError: If the string is not one of the recognised flag values.
    """
    if isinstance(value, bool):
        return value
    normalised = value.strip().lower()
    if normalised in TRUTHY_VALUES:
        return True
    if normalised in FALSY_VALUES:
        return False
    raise ValueError(
        f"Expected a boolean environment variable (true or false) but got '{value}'"
    )
