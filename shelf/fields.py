"""Field rules shared by the data files and the shell."""

# Data file fields are joined with this character and never quoted.
DELIMITER = ","


def has_delimiter(text: str) -> bool:
    return DELIMITER in text
