"""
Password validation for sign-up and admin-created accounts
"""

import re


class PasswordValidator:
    """Password strength rules"""

    MIN_LENGTH = 8
    MAX_LENGTH = 128
    REQUIRE_UPPERCASE = True
    REQUIRE_LOWERCASE = True
    REQUIRE_DIGIT = True
    REQUIRE_SPECIAL = False

    @classmethod
    def validate(cls, password):
        """
        Validate password strength

        Args:
            password (str): The password to validate

        Returns:
            tuple: (is_valid, error_message)
                is_valid (bool): True if password meets all requirements
                error_message (str): Error message if validation fails, empty string if valid
        """
        if not password:
            return False, "Password is required"

        if len(password) < cls.MIN_LENGTH:
            return False, f"Password must be at least {cls.MIN_LENGTH} characters"

        if len(password) > cls.MAX_LENGTH:
            return False, f"Password must be less than {cls.MAX_LENGTH} characters"

        if cls.REQUIRE_UPPERCASE and not re.search(r'[A-Z]', password):
            return False, "Password must contain at least one uppercase letter"

        if cls.REQUIRE_LOWERCASE and not re.search(r'[a-z]', password):
            return False, "Password must contain at least one lowercase letter"

        if cls.REQUIRE_DIGIT and not re.search(r'\d', password):
            return False, "Password must contain at least one digit"

        if cls.REQUIRE_SPECIAL and not re.search(r'[!@#$%^&*()_+\-=\[\]{}|;:,.<>?]', password):
            return False, "Password must contain at least one special character"

        return True, ""

    @classmethod
    def get_requirements_text(cls):
        """Human readable list of requirements for the sign-up form."""
        requirements = [f"At least {cls.MIN_LENGTH} characters"]
        if cls.REQUIRE_UPPERCASE:
            requirements.append("One uppercase letter")
        if cls.REQUIRE_LOWERCASE:
            requirements.append("One lowercase letter")
        if cls.REQUIRE_DIGIT:
            requirements.append("One digit")
        if cls.REQUIRE_SPECIAL:
            requirements.append("One special character")
        return requirements
