# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

import json
import logging
from dataclasses import dataclass, field
from typing import Optional

from fieldguard import ValidationError, Validator, redact_paths_containing, tag

# Basic logging setup
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


# --- Records: one per validation strategy ---

# 1. Tags on dataclass fields
@dataclass
class Address:
    city: str = tag("required")
    zip_code: str = tag("len=5,numeric", name="zip", default="")


@dataclass
class UserProfile:
    name: str = tag("required,min=2")
    email: str = tag("required,email")
    password: str = tag("omitempty,min=12", default="")
    address: Optional[Address] = None


# 2. The record validates itself (with request context)
@dataclass
class Invitation:
    email: str = ""
    role: str = "viewer"

    def validate_context(self, ctx):
        if self.role == "admin" and not (ctx or {}).get("is_owner"):
            return ValueError("only owners can invite admins")
        return None


# 3. The record supplies a JSON schema
@dataclass
class Webhook:
    url: str = ""
    events: list = field(default_factory=list)

    def json_schema(self):
        return "webhook.v1", {
            "type": "object",
            "properties": {
                "url": {"type": "string", "pattern": "^https://"},
                "events": {"type": "array", "minItems": 1, "items": {"type": "string"}},
            },
            "required": ["url", "events"],
        }


def show(title: str, error: Optional[ValidationError]) -> None:
    print(f"\n--- {title} ---")
    if error is None:
        print("valid")
    else:
        print(json.dumps(error.to_dict(), indent=2, default=str))


def main():
    validator = Validator(max_errors=10, redactor=redact_paths_containing("password"))

    # Full validation: every constraint applies
    show(
        "create user",
        validator.check(UserProfile(name="A", email="not-an-email", password="short")),
    )

    # PATCH: only the keys present in the body are checked
    body = '{"address": {"zip": "12ab"}}'
    patch = UserProfile(name="", email="", address=Address(city="", zip_code="12ab"))
    show("patch user", validator.check_partial(patch, body))

    show("invite admin (member)", validator.check(Invitation("a@b.com", "admin"), context={"is_owner": False}))
    show("invite admin (owner)", validator.check(Invitation("a@b.com", "admin"), context={"is_owner": True}))

    show("register webhook", validator.check(Webhook(url="http://example.com")))

    # Extra keys in the body are rejected on request
    show(
        "unknown keys",
        validator.check(
            Address(city="Paris", zip_code="75001"),
            raw={"city": "Paris", "zip": "75001", "is_admin": True},
            disallow_unknown_fields=True,
        ),
    )


if __name__ == "__main__":
    main()
