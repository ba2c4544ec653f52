# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Password strength policy shared by signup and reset-password."""

import re

MIN_LENGTH = 8
MAX_LENGTH = 100


def validate_password(candidate: str) -> list[dict]:
    """Return the rules ``candidate`` violates, in rule order. Empty list means acceptable."""
    violations: list[dict] = []
    if len(candidate) < MIN_LENGTH:
        violations.append({
            "validation": "min",
            "arguments": MIN_LENGTH,
            "message": f"The string should have a minimum length of {MIN_LENGTH} characters",
        })
    if len(candidate) > MAX_LENGTH:
        violations.append({
            "validation": "max",
            "arguments": MAX_LENGTH,
            "message": f"The string should have a maximum length of {MAX_LENGTH} characters",
        })
    if not re.search("[A-Z]", candidate):
        violations.append({
            "validation": "uppercase",
            "message": "The string should have a minimum of 1 uppercase letter",
        })
    if not re.search("[a-z]", candidate):
        violations.append({
            "validation": "lowercase",
            "message": "The string should have a minimum of 1 lowercase letter",
        })
    if any(c.isspace() for c in candidate):
        violations.append({
            "validation": "spaces",
            "inverted": True,
            "message": "The string should not have spaces",
        })
    return violations
