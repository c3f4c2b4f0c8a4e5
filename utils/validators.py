from typing import Any, Optional


class TextValidator:
    """Presence checks for request fields.

    Only presence is checked: a value counts when it is a non-empty string
    that can be stored as UTF-8. Whitespace is kept as sent.
    """

    @staticmethod
    def is_present(value: Any) -> bool:
        if not isinstance(value, str) or value == "":
            return False
        # JSON'da geçerli olan tek başına vekil karakterler (ör. "\ud800") saklanamaz
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            return False
        return True

    @staticmethod
    def validate_title(title: Optional[str]) -> bool:
        return TextValidator.is_present(title)

    @staticmethod
    def validate_comment(comment: Optional[str]) -> bool:
        return TextValidator.is_present(comment)
