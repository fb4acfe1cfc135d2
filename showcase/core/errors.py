"""
ERROR TYPES SHARED BY SERVICES AND ROUTES
"""


#Raised by the validation gate with every violated constraint
class ContactValidationError(Exception):
    def __init__(self, errors: list[dict[str, str]]):
        self.errors = errors
        super().__init__(
            "; ".join(f"{e['field']}: {e['message']}" for e in errors)
        )


#Raised when the contact store rejects a write; detail stays server-side
class ContactStorageError(RuntimeError):
    pass
