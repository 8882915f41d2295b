"""Authentication: password hashing, bearer tokens and the admin guard."""
