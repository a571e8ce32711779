"""
Change API

A small stateless HTTP service that accepts "Change" requests describing a
desired code modification and validates them before acknowledging.

It does NOT:
- Dispatch the change to an agent
- Touch git or any repository
- Queue or store accepted requests

It DOES:
- Validate the request structure and field values
- Apply the default branch
- Echo the normalized request back
"""

__version__ = "1.0.0"
