"""HTTP layer for Quill.

- Validates query and path parameters
- Calls the repository with an injected session
- Wraps results in the ApiResponse envelope
"""
